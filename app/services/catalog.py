"""
Product catalog: the public storefront, the directory of approved vendors,
managed categories and the vendor's own product list.

Only products of approved, non-rejected shops are visible to the public.
"""
import logging
import re
from datetime import datetime

from flask import current_app
from sqlalchemy import func, or_

from app.auth.permissions import Identity, Requirement, ensure
from app.exceptions import ConflictError, Forbidden, NotFound, ValidationError
from app.services.shaping import category_dto, product_dto, public_vendor_dto
from app.utils.db import paginate
from models import db
from models.cart import CartItem
from models.enums import OrderStatus, Role
from models.order import Order, OrderItem
from models.product import Category, Product
from models.shop import VendorShop
from models.wishlist import Wishlist

logger = logging.getLogger(__name__)

RELATED_LIMIT = 4
VENDOR_PAGE_SIZE = 12
PRODUCT_ATTRIBUTES = ("size", "color", "material", "brand")
_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I)

SORT_ORDERS = {
    "featured": (Product.created_at.desc(),),
    "newest": (Product.created_at.desc(),),
    "price-low": (Product.price.asc(),),
    "price-high": (Product.price.desc(),),
    "rating": (Product.rating.desc(), Product.created_at.desc()),
}


def visible_products():
    return Product.query.join(VendorShop, VendorShop.id == Product.shop_id).filter(
        VendorShop.is_approved.is_(True),
        VendorShop.is_rejected.is_(False),
    )


def _apply_search(query, search):
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(func.lower(Product.name).like(pattern), func.lower(Product.description).like(pattern))
        )
    return query


# -- public storefront --------------------------------------------------------

def _filter_category(query, category):
    # ids select managed categories; anything else matches the legacy name
    if _UUID_RE.match(category):
        return query.filter(Product.category_id == category)
    return query.filter(Product.category == category)


def list_products(page=1, limit=12, search="", category="", vendor="", sort="featured"):
    query = visible_products().filter(Product.in_stock.is_(True))
    query = _apply_search(query, search.strip())
    if category:
        query = _filter_category(query, category)
    if vendor:
        query = query.filter(Product.vendor_id == vendor)

    query = query.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS["featured"]))
    rows, pagination = paginate(query, page, limit)
    return [product_dto(p) for p in rows], pagination


def get_product(product_id: str) -> dict:
    product = visible_products().filter(Product.id == product_id).first()
    if product is None:
        raise NotFound("Product not found")

    related_query = visible_products().filter(Product.id != product.id, Product.in_stock.is_(True))
    if product.category_id:
        related_query = related_query.filter(Product.category_id == product.category_id)
    elif product.category:
        related_query = related_query.filter(Product.category == product.category)
    related = related_query.order_by(Product.created_at.desc()).limit(RELATED_LIMIT).all()

    data = product_dto(product)
    data["relatedProducts"] = [product_dto(p) for p in related]
    return data


def shop_categories() -> list:
    counts = (
        db.session.query(Category, func.count(Product.id))
        .join(Product, Product.category_id == Category.id)
        .join(VendorShop, VendorShop.id == Product.shop_id)
        .filter(
            Category.is_active.is_(True),
            Product.in_stock.is_(True),
            VendorShop.is_approved.is_(True),
            VendorShop.is_rejected.is_(False),
        )
        .group_by(Category.id)
        .all()
    )
    counts.sort(key=lambda row: (-row[1], row[0].name))
    return [category_dto(c, product_count=n) for c, n in counts if n > 0]


def categories_with_images() -> list:
    """Legacy category names of visible in-stock products, each with a cover image."""
    products = (
        visible_products()
        .filter(Product.in_stock.is_(True), Product.category.isnot(None), Product.category != "")
        .order_by(Product.created_at)
    )
    grouped = {}
    for product in products:
        if not product.images:
            continue
        entry = grouped.setdefault(product.category, {
            "name": product.category,
            "count": 0,
            "image": product.images[0],
            "description": f"Explore our collection of {product.category.lower()} products from local vendors",
        })
        entry["count"] += 1
    return sorted(grouped.values(), key=lambda e: (-e["count"], e["name"]))


def filter_options(category="") -> dict:
    """Distinct attribute values across the in-stock storefront."""
    base = visible_products().filter(Product.in_stock.is_(True))
    if category and category != "all":
        base = _filter_category(base, category)
    options = {}
    for attr, key in (("size", "sizes"), ("color", "colors"), ("material", "materials"), ("brand", "brands")):
        column = getattr(Product, attr)
        values = base.filter(column.isnot(None), column != "").with_entities(column).distinct()
        options[key] = sorted({v for (v,) in values if v.strip()})
    return options


# -- vendor directory ---------------------------------------------------------

def _approved_shops():
    return VendorShop.query.filter(VendorShop.is_approved.is_(True), VendorShop.is_rejected.is_(False))


def _delivered_sales(vendor_ids) -> dict:
    """``{vendor_id: (units, revenue)}`` over delivered orders."""
    if not vendor_ids:
        return {}
    rows = (
        db.session.query(
            Product.vendor_id,
            func.sum(OrderItem.quantity),
            func.sum(OrderItem.price * OrderItem.quantity),
        )
        .join(OrderItem, OrderItem.product_id == Product.id)
        .join(Order, Order.id == OrderItem.order_id)
        .filter(Product.vendor_id.in_(vendor_ids), Order.status == OrderStatus.DELIVERED)
        .group_by(Product.vendor_id)
        .all()
    )
    return {vendor_id: (int(units or 0), revenue or 0) for vendor_id, units, revenue in rows}


def list_public_vendors(page=1, limit=VENDOR_PAGE_SIZE, search="", district="", category=""):
    query = _approved_shops()
    search = search.strip()
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(func.lower(VendorShop.name).like(pattern), func.lower(VendorShop.description).like(pattern))
        )
    if district:
        query = query.filter(VendorShop.district == district)
    if category:
        query = query.filter(VendorShop.products.any(func.lower(Product.category) == category.strip().lower()))

    rows, pagination = paginate(query.order_by(VendorShop.created_at.desc()), page, limit)
    sales = _delivered_sales([shop.vendor_id for shop in rows])
    return [public_vendor_dto(shop, *sales.get(shop.vendor_id, (0, 0))) for shop in rows], pagination


def vendor_districts() -> list:
    rows = _approved_shops().with_entities(VendorShop.district).distinct()
    return sorted({d for (d,) in rows if d and d.strip()})


def vendor_categories() -> list:
    rows = (
        db.session.query(Product.category)
        .join(VendorShop, VendorShop.vendor_id == Product.vendor_id)
        .filter(VendorShop.is_approved.is_(True), VendorShop.is_rejected.is_(False))
        .distinct()
    )
    return sorted({c for (c,) in rows if c and c.strip()})


# -- managed categories -------------------------------------------------------

def _product_count(category_id: str) -> int:
    return Product.query.filter_by(category_id=category_id).count()


def list_categories(identity: Identity) -> list:
    ensure(identity, Requirement.of(list(Role)))
    query = Category.query
    if identity.role != Role.ADMIN:
        query = query.filter(Category.is_active.is_(True))
    return [category_dto(c, product_count=_product_count(c.id)) for c in query.order_by(Category.name)]


def _admin(identity: Identity):
    ensure(identity, Requirement.of(Role.ADMIN))


def _load_category(category_id: str) -> Category:
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")
    return category


def _assert_unique_name(name: str, exclude_id=None):
    query = Category.query.filter(func.lower(Category.name) == name.lower())
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise ConflictError("Category with this name already exists")


def get_category(identity: Identity, category_id: str) -> dict:
    _admin(identity)
    category = _load_category(category_id)
    return category_dto(category, product_count=_product_count(category.id))


def create_category(identity: Identity, data: dict) -> dict:
    _admin(identity)
    name = data["name"].strip()
    _assert_unique_name(name)
    category = Category(
        name=name,
        description=data.get("description"),
        image=data.get("image"),
        is_active=data.get("isActive", True),
    )
    db.session.add(category)
    db.session.flush()
    logger.info("category %s created by %s", category.id, identity.user_id)
    return category_dto(category, product_count=0)


def update_category(identity: Identity, category_id: str, data: dict) -> dict:
    _admin(identity)
    category = _load_category(category_id)
    if data.get("name") is not None:
        name = data["name"].strip()
        _assert_unique_name(name, exclude_id=category.id)
        category.name = name
    if "description" in data:
        category.description = data["description"]
    if "image" in data:
        category.image = data["image"]
    if data.get("isActive") is not None:
        category.is_active = data["isActive"]
    category.updated_at = datetime.utcnow()
    return category_dto(category, product_count=_product_count(category.id))


def delete_category(identity: Identity, category_id: str) -> None:
    _admin(identity)
    category = _load_category(category_id)
    if _product_count(category.id) > 0:
        raise ConflictError("Cannot delete category with associated products")
    db.session.delete(category)
    logger.info("category %s deleted by %s", category_id, identity.user_id)


# -- vendor products ----------------------------------------------------------

def _vendor_shop(identity: Identity) -> VendorShop:
    ensure(identity, Requirement.of(Role.VENDOR, action="manage_products"))
    shop = VendorShop.query.filter_by(vendor_id=identity.user_id).first()
    if shop is None:
        raise Forbidden("Vendor shop not set up. Please create a shop first.")
    return shop


def _own_product(identity: Identity, product_id: str) -> Product:
    product = Product.query.filter_by(id=product_id, vendor_id=identity.user_id).first()
    if product is None:
        raise NotFound("Product not found or access denied")
    return product


def _active_category(category_id: str) -> Category:
    category = Category.query.filter_by(id=category_id, is_active=True).first()
    if category is None:
        raise ValidationError("Invalid category selected. Please choose a valid category.")
    return category


def _clean(value):
    value = (value or "").strip()
    return value or None


def _check_images(images):
    limit = current_app.config["MAX_PRODUCT_IMAGES"]
    if images is not None and len(images) > limit:
        raise ValidationError(f"A product may have at most {limit} images")


def vendor_products(identity: Identity, search="") -> list:
    _vendor_shop(identity)
    query = _apply_search(Product.query.filter_by(vendor_id=identity.user_id), (search or "").strip())
    return [product_dto(p) for p in query.order_by(Product.created_at.desc())]


def vendor_product(identity: Identity, product_id: str) -> dict:
    _vendor_shop(identity)
    return product_dto(_own_product(identity, product_id))


def create_product(identity: Identity, data: dict) -> dict:
    shop = _vendor_shop(identity)
    category = _active_category(data["categoryId"])
    _check_images(data.get("images"))

    limit = current_app.config["MAX_PRODUCTS_PER_VENDOR"]
    if Product.query.filter_by(vendor_id=identity.user_id).count() >= limit:
        raise Forbidden(f"Product limit reached. Maximum {limit} products allowed.")

    product = Product(
        vendor_id=identity.user_id,
        shop_id=shop.id,
        name=data["name"].strip(),
        description=data["description"].strip(),
        price=data["price"],
        category=category.name,
        category_id=category.id,
        images=list(data.get("images") or []),
    )
    for attr in PRODUCT_ATTRIBUTES:
        setattr(product, attr, _clean(data.get(attr)))
    product.set_stock(data["stock"])
    db.session.add(product)
    db.session.flush()
    logger.info("product %s created by vendor %s", product.id, identity.user_id)
    return product_dto(product)


def update_product(identity: Identity, product_id: str, data: dict) -> dict:
    _vendor_shop(identity)
    product = _own_product(identity, product_id)
    if data.get("categoryId"):
        category = _active_category(data["categoryId"])
        product.category_id = category.id
        product.category = category.name
    _check_images(data.get("images"))

    if data.get("name") is not None:
        product.name = data["name"].strip()
    if data.get("description") is not None:
        product.description = data["description"].strip()
    if data.get("price") is not None:
        product.price = data["price"]
    if data.get("images") is not None:
        product.images = list(data["images"])
    if data.get("stock") is not None:
        product.set_stock(data["stock"])
    for attr in PRODUCT_ATTRIBUTES:
        if attr in data:
            setattr(product, attr, _clean(data[attr]))
    product.updated_at = datetime.utcnow()
    return product_dto(product)


def delete_product(identity: Identity, product_id: str) -> None:
    _vendor_shop(identity)
    product = _own_product(identity, product_id)
    if OrderItem.query.filter_by(product_id=product.id).first():
        raise ConflictError("Cannot delete product with existing orders. Consider archiving instead.")

    CartItem.query.filter_by(product_id=product.id).delete(synchronize_session=False)
    Wishlist.query.filter_by(product_id=product.id).delete(synchronize_session=False)
    db.session.delete(product)
    logger.info("product %s deleted by vendor %s", product_id, identity.user_id)
