"""
Vendor-facing order operations.

An order is visible to a vendor when at least one of its items references one
of that vendor's products. Orders outside that set are reported as not found,
never as forbidden.
"""
import logging
from collections import Counter
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, or_

from app.auth.permissions import Identity, Requirement, ensure
from app import metrics
from app.exceptions import NotFound, ValidationError
from app.services.shaping import money, vendor_items, vendor_order_view, vendor_total
from models import db
from models.enums import OrderStatus, Role
from models.order import Order, OrderItem
from models.product import Product
from models.user import User

logger = logging.getLogger(__name__)

OPEN_STATUSES = (OrderStatus.PENDING, OrderStatus.PROCESSING)
ANALYTICS_MONTHS = 6
TOP_PRODUCTS = 5


def _vendor_orders(vendor_id: str):
    has_item = (
        db.session.query(OrderItem.id)
        .join(Product, Product.id == OrderItem.product_id)
        .filter(OrderItem.order_id == Order.id, Product.vendor_id == vendor_id)
        .exists()
    )
    return Order.query.filter(has_item)


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus.parse(value)
    except ValueError:
        raise ValidationError("Invalid status", details={"allowed": [s.external for s in OrderStatus]})


def update_status(order_id: str, vendor: Identity, new_status) -> dict:
    ensure(vendor, Requirement.of(Role.VENDOR, action="update_order_status"))
    status = parse_status(new_status)

    order = _vendor_orders(vendor.user_id).filter(Order.id == order_id).with_for_update().first()
    if order is None:
        raise NotFound("Order not found or access denied")

    previous = OrderStatus.parse(order.status)
    order.status = status
    order.updated_at = datetime.utcnow()
    logger.info("order %s status %s -> %s by vendor %s", order.id, previous.value, status.value, vendor.user_id)
    metrics.ORDER_STATUS_CHANGES.labels(status.external).inc()
    return vendor_order_view(order, vendor.user_id)


def list_for_vendor(vendor: Identity, status=None, search=None) -> list:
    ensure(vendor, Requirement.of(Role.VENDOR))
    query = _vendor_orders(vendor.user_id)

    if status and status.strip().lower() != "all":
        query = query.filter(Order.status == parse_status(status))

    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.join(User, User.id == Order.customer_id).filter(
            or_(
                func.lower(Order.id).like(pattern),
                func.lower(Order.order_number).like(pattern),
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )

    orders = query.order_by(Order.created_at.desc()).all()
    return [vendor_order_view(o, vendor.user_id) for o in orders]


def recent_for_vendor(vendor: Identity, limit: int = 5) -> list:
    ensure(vendor, Requirement.of(Role.VENDOR))
    orders = _vendor_orders(vendor.user_id).order_by(Order.created_at.desc()).limit(limit).all()
    return [vendor_order_view(o, vendor.user_id) for o in orders]


def vendor_stats(vendor: Identity) -> dict:
    ensure(vendor, Requirement.of(Role.VENDOR))
    products = Product.query.filter_by(vendor_id=vendor.user_id)
    orders = _vendor_orders(vendor.user_id).all()

    revenue = sum((vendor_total(o, vendor.user_id) for o in orders), Decimal("0"))
    pending = sum(1 for o in orders if OrderStatus.parse(o.status) in OPEN_STATUSES)
    return {
        "totalProducts": products.count(),
        "inStockProducts": products.filter_by(in_stock=True).count(),
        "totalOrders": len(orders),
        "pendingOrders": pending,
        "totalRevenue": money(revenue),
    }


def month_starts(now: datetime, count: int) -> list:
    """First day of the ``count`` calendar months ending with ``now``'s, oldest first."""
    year, month = now.year, now.month
    starts = []
    for _ in range(count):
        starts.append(datetime(year, month, 1))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    return starts[::-1]


def growth_percent(current, previous) -> float:
    if not previous:
        return 100.0 if current else 0.0
    change = (Decimal(str(current)) - Decimal(str(previous))) / Decimal(str(previous)) * 100
    return float(change.quantize(Decimal("0.1")))


def _average(revenue, count) -> Decimal:
    return Decimal(str(revenue)) / count if count else Decimal("0")


def vendor_analytics(vendor: Identity, now: datetime = None) -> dict:
    """Revenue and order trends over the last months, plus best sellers."""
    ensure(vendor, Requirement.of(Role.VENDOR))
    now = now or datetime.utcnow()
    orders = _vendor_orders(vendor.user_id).all()
    totals = {o.id: vendor_total(o, vendor.user_id) for o in orders}
    revenue = sum(totals.values(), Decimal("0"))

    months = month_starts(now, ANALYTICS_MONTHS)
    buckets = {(m.year, m.month): [Decimal("0"), 0] for m in months}
    sold = Counter()
    for order in orders:
        created = order.created_at
        bucket = buckets.get((created.year, created.month)) if created else None
        if bucket is not None:
            bucket[0] += totals[order.id]
            bucket[1] += 1
        for item in vendor_items(order, vendor.user_id):
            sold[item.product_id] += item.quantity

    all_products = Product.query.filter_by(vendor_id=vendor.user_id).all()
    in_stock = [p for p in all_products if p.in_stock]
    listed = Counter((p.created_at.year, p.created_at.month) for p in all_products if p.created_at)
    top = sorted(in_stock, key=lambda p: (-sold[p.id], p.name))[:TOP_PRODUCTS]

    (cur_revenue, cur_orders), (prev_revenue, prev_orders) = (
        buckets[(months[-1].year, months[-1].month)],
        buckets[(months[-2].year, months[-2].month)],
    )
    return {
        "totalRevenue": money(revenue),
        "totalOrders": len(orders),
        "averageOrderValue": money(_average(revenue, len(orders))),
        "totalProducts": len(in_stock),
        "monthlyData": [
            {
                "month": m.strftime("%b"),
                "year": m.year,
                "revenue": money(buckets[(m.year, m.month)][0]),
                "orders": buckets[(m.year, m.month)][1],
            }
            for m in months
        ],
        "topProducts": [
            {
                "id": p.id,
                "name": p.name,
                "category": p.category,
                "price": money(p.price),
                "sales": sold[p.id],
                "images": p.images or [],
            }
            for p in top
        ],
        "growthMetrics": {
            "revenueGrowth": growth_percent(cur_revenue, prev_revenue),
            "ordersGrowth": growth_percent(cur_orders, prev_orders),
            "aovGrowth": growth_percent(_average(cur_revenue, cur_orders), _average(prev_revenue, prev_orders)),
            "productsGrowth": growth_percent(
                listed[(months[-1].year, months[-1].month)],
                listed[(months[-2].year, months[-2].month)],
            ),
        },
    }
