import logging

from sqlalchemy.exc import IntegrityError

from app.auth.permissions import Identity, Requirement, ensure
from app.exceptions import ConflictError, NotFound
from app.services.catalog import visible_products
from app.services.shaping import cart_item_dto
from models import db
from models.cart import CartItem
from models.enums import Role
from models.product import Product

logger = logging.getLogger(__name__)


def _customer(identity: Identity) -> Identity:
    return ensure(identity, Requirement.of(Role.CUSTOMER, action="manage_cart"))


def list_items(identity: Identity) -> list:
    _customer(identity)
    items = CartItem.query.filter_by(user_id=identity.user_id).order_by(CartItem.added_at).all()
    return [cart_item_dto(i) for i in items]


def add_item(identity: Identity, product_id: str, quantity: int = 1) -> dict:
    _customer(identity)
    product = (
        visible_products()
        .filter(Product.id == product_id, Product.in_stock.is_(True))
        .with_for_update(of=Product)
        .first()
    )
    if product is None:
        raise NotFound("Product not available")

    item = CartItem.query.filter_by(user_id=identity.user_id, product_id=product_id).first()
    wanted = quantity + (item.quantity if item else 0)
    if wanted > product.stock_count:
        raise ConflictError(
            f"Only {product.stock_count} items available",
            details={"available": product.stock_count},
        )

    if item is None:
        item = CartItem(user_id=identity.user_id, product_id=product_id, quantity=wanted)
        db.session.add(item)
    else:
        item.quantity = wanted
    try:
        db.session.flush()
    except IntegrityError:
        # a concurrent add created the line first
        raise ConflictError("Product is already in your cart. Please try again.")
    return cart_item_dto(item)


def _owned_item(identity: Identity, item_id: str, lock=False) -> CartItem:
    query = CartItem.query.filter_by(id=item_id, user_id=identity.user_id)
    if lock:
        query = query.with_for_update()
    item = query.first()
    if item is None:
        raise NotFound("Cart item not found")
    return item


def update_quantity(identity: Identity, item_id: str, quantity: int) -> dict:
    _customer(identity)
    item = _owned_item(identity, item_id, lock=True)
    product = db.session.query(Product).filter_by(id=item.product_id).with_for_update().one()

    if quantity > product.stock_count:
        raise ConflictError(
            f"Only {product.stock_count} items available",
            details={"available": product.stock_count},
        )
    item.quantity = quantity
    return cart_item_dto(item)


def remove_item(identity: Identity, item_id: str) -> None:
    _customer(identity)
    item = _owned_item(identity, item_id)
    db.session.delete(item)


def clear(identity: Identity) -> int:
    _customer(identity)
    removed = CartItem.query.filter_by(user_id=identity.user_id).delete(synchronize_session=False)
    logger.info("cleared %s cart lines for user %s", removed, identity.user_id)
    return removed
