"""ORM builders shared by the API tests."""
import json
from decimal import Decimal
from werkzeug.security import generate_password_hash

from app.utils import create_access_token
from models import db
from models.enums import OrderStatus, Role
from models.order import Order, OrderItem
from models.product import Category, Product
from models.shop import VendorShop
from models.user import User

PASSWORD = "secret-pass-1"
_counter = {"n": 0}


def _next():
    _counter["n"] += 1
    return _counter["n"]


def make_user(role=Role.CUSTOMER, district=None, email=None, first_name="Test", last_name="User", password=PASSWORD):
    n = _next()
    user = User(
        email=email or f"user{n}@example.com",
        password_hash=generate_password_hash(password, method="pbkdf2:sha256:1000"),
        first_name=first_name,
        last_name=last_name,
        role=Role.parse(role),
        district=district,
    )
    db.session.add(user)
    db.session.commit()
    return user


def make_vendor(district="Lilongwe", approved=True, rejected=False, first_name="Vera"):
    vendor = make_user(Role.VENDOR, district=district, first_name=first_name, last_name="Vendor")
    shop = VendorShop(
        vendor_id=vendor.id,
        name=f"{first_name}'s Shop",
        description="Test shop",
        district=district,
        is_approved=approved,
        is_rejected=rejected,
    )
    db.session.add(shop)
    db.session.commit()
    return vendor, shop


def make_category(name=None, active=True):
    category = Category(name=name or f"Category {_next()}", is_active=active)
    db.session.add(category)
    db.session.commit()
    return category


def make_product(vendor, shop, price="100.00", stock=10, category=None, name=None):
    product = Product(
        vendor_id=vendor.id,
        shop_id=shop.id,
        name=name or f"Product {_next()}",
        description="A product",
        price=Decimal(price),
        category_id=category.id if category else None,
        category=category.name if category else None,
        images=["/img/p.png"],
    )
    product.set_stock(stock)
    db.session.add(product)
    db.session.commit()
    return product


def make_order(customer, lines, status=OrderStatus.PENDING, address=None, raw_address=None):
    """``lines`` is a list of ``(product, quantity)`` pairs priced at the product's current price."""
    subtotal = sum((Decimal(str(p.price)) * q for p, q in lines), Decimal("0"))
    order = Order(
        order_number=f"WH{_next():06d}",
        customer_id=customer.id,
        status=status,
        subtotal=subtotal,
        shipping_cost=Decimal("0"),
        total_amount=subtotal,
        shipping_address=raw_address if raw_address is not None else json.dumps(address or {"district": "Lilongwe"}),
        district=(address or {}).get("district", "Lilongwe"),
    )
    for product, quantity in lines:
        order.items.append(OrderItem(product_id=product.id, price=product.price, quantity=quantity))
    db.session.add(order)
    db.session.commit()
    return order


def auth_header(user):
    token = create_access_token(user.id, user.email, Role.parse(user.role).value)
    return {"Authorization": f"Bearer {token}"}
