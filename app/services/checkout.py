"""
Checkout and the customer's own order history.

``place_order`` validates every line against locked product rows, writes the
order with price snapshots, decrements stock and empties the cart. The caller
owns the transaction; nothing here commits.
"""
import json
import logging
from collections import Counter
from decimal import Decimal

from flask import current_app
from sqlalchemy.exc import IntegrityError

from app.auth.permissions import Identity, Requirement, ensure
from app import metrics
from app.exceptions import ConflictError, NotFound, Unauthenticated, ValidationError
from app.services.order_status import parse_status
from app.services.shaping import customer_order_dto
from app.utils.db import paginate
from models import db
from models.cart import CartItem
from models.enums import OrderStatus, Role
from models.order import Order, OrderItem
from models.product import Product

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _dec(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT)


def next_order_number() -> str:
    count = db.session.query(Order.id).count()
    return f"WH{count + 1:06d}"


def _lock_products(product_ids):
    rows = (
        Product.query.filter(Product.id.in_(sorted(set(product_ids))))
        .order_by(Product.id)
        .with_for_update()
        .all()
    )
    return {p.id: p for p in rows}


def place_order(identity: Identity, payload: dict) -> dict:
    ensure(identity, Requirement.of(Role.CUSTOMER, action="place_order"))
    lines = payload["items"]
    products = _lock_products(line["productId"] for line in lines)
    # repeated lines for one product draw on the same stock
    wanted = Counter()
    for line in lines:
        wanted[line["productId"]] += line["quantity"]

    subtotal = Decimal("0")
    for line in lines:
        product = products.get(line["productId"])
        label = line.get("name") or line["productId"]
        if product is None:
            raise ValidationError(f"Product not found: {label}")
        if not product.in_stock:
            raise ValidationError(f"Product out of stock: {product.name}")
        if product.stock_count < wanted[product.id]:
            raise ConflictError(
                f"Insufficient stock for: {product.name}. Only {product.stock_count} available.",
                details={"productId": product.id, "available": product.stock_count},
            )
        if _dec(product.price) != _dec(line["price"]):
            raise ConflictError(f"Price has changed for: {product.name}. Please refresh your cart.")
        subtotal += _dec(product.price) * line["quantity"]

    shipping_cost = _dec(payload.get("shippingCost") or 0)
    total = subtotal + shipping_cost
    payment_method = payload.get("paymentMethod", "cod")
    cod_limit = _dec(current_app.config["COD_ORDER_LIMIT"])
    if payment_method == "cod" and total > cod_limit:
        raise ValidationError(f"Cash on Delivery is only available for orders up to {cod_limit:,.2f}")

    address = payload["shippingAddress"]
    order = Order(
        order_number=next_order_number(),
        customer_id=identity.user_id,
        status=OrderStatus.PENDING,
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        total_amount=total,
        shipping_address=json.dumps(address),
        district=address.get("district"),
        shipping_method=payload.get("shippingMethod"),
        payment_method=payment_method,
        special_instructions=payload.get("specialInstructions"),
    )
    for line in lines:
        product = products[line["productId"]]
        order.items.append(OrderItem(product_id=product.id, price=_dec(product.price), quantity=line["quantity"]))
        product.set_stock(product.stock_count - line["quantity"])
    try:
        db.session.add(order)
        db.session.flush()
        CartItem.query.filter_by(user_id=identity.user_id).delete(synchronize_session=False)
    except IntegrityError:
        raise ConflictError("Order number conflict. Please try again.")

    logger.info("order %s placed by %s (%s lines)", order.order_number, identity.user_id, len(lines))
    metrics.ORDERS_PLACED.labels(payment_method).inc()
    return customer_order_dto(order)


def _own_orders(identity: Identity):
    if identity is None:
        raise Unauthenticated()
    return Order.query.filter_by(customer_id=identity.user_id)


def list_orders(identity: Identity, page: int = 1, limit: int = 10, status=None):
    query = _own_orders(identity)
    if status and status.strip().lower() != "all":
        query = query.filter(Order.status == parse_status(status))
    rows, pagination = paginate(query.order_by(Order.created_at.desc()), page, limit)
    return [customer_order_dto(o) for o in rows], pagination


def get_order(identity: Identity, order_id: str) -> dict:
    order = _own_orders(identity).filter(Order.id == order_id).first()
    if order is None:
        raise NotFound("Order not found")
    return customer_order_dto(order, parse_address=True)
