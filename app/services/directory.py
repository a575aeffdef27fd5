"""
User and vendor listings and the dashboards for admins and regional admins.

Every query for a regional admin is narrowed to its district before anything
else is applied.
"""
from datetime import datetime, timedelta
from decimal import Decimal

from flask import current_app
from sqlalchemy import func, or_, select

from app.auth.permissions import Identity, Requirement, district_scope, ensure
from app.services.order_status import ANALYTICS_MONTHS, growth_percent, month_starts
from app.services.shaping import iso, money, shop_dto, shop_status, user_dto
from app.utils.db import paginate
from models import db
from models.enums import REGIONAL_MANAGED_ROLES, OrderStatus, Role
from models.order import Order, OrderItem
from models.product import Product
from models.shop import VendorShop
from models.user import User

RECENT_DAYS = 7
RECENT_LIMIT = 5
IN_PROGRESS_STATUSES = (OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED)


def _user_search(query, search):
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )
    return query


def _shop_status_filter(query, status):
    if status == "pending":
        return query.filter(VendorShop.is_approved.is_(False), VendorShop.is_rejected.is_(False))
    if status == "approved":
        return query.filter(VendorShop.is_approved.is_(True), VendorShop.is_rejected.is_(False))
    if status == "rejected":
        return query.filter(VendorShop.is_rejected.is_(True))
    return query


def _vendor_row(shop):
    data = shop_dto(shop)
    vendor = shop.vendor
    data["vendor"] = user_dto(vendor) if vendor else None
    data["productCount"] = len(shop.products)
    data["createdAt"] = shop.created_at.isoformat() if shop.created_at else None
    return data


def _user_row(user):
    data = user_dto(user)
    if user.vendor_shop is not None:
        data["vendorShop"] = shop_dto(user.vendor_shop)
    return data


def _scope(identity: Identity):
    ensure(identity, Requirement.of((Role.ADMIN, Role.REGIONAL_ADMIN), district_scoped=True))
    return district_scope(identity)


def list_users(identity: Identity, page=1, limit=10, role="all", search=""):
    district = _scope(identity)
    query = User.query
    if district is not None:
        query = query.filter(User.district == district, User.role.in_(REGIONAL_MANAGED_ROLES))
    if role and role != "all":
        query = query.filter(User.role == Role.parse(role))
    query = _user_search(query, search)

    rows, pagination = paginate(query.order_by(User.created_at.desc()), page, limit)
    return [_user_row(u) for u in rows], pagination


def user_stats(identity: Identity) -> dict:
    district = _scope(identity)
    users = User.query
    shops = VendorShop.query
    if district is not None:
        users = users.filter(User.district == district, User.role.in_(REGIONAL_MANAGED_ROLES))
        shops = shops.filter(VendorShop.district == district)

    by_role = dict(
        users.with_entities(User.role, func.count(User.id)).group_by(User.role).all()
    )
    since = datetime.utcnow() - timedelta(days=RECENT_DAYS)
    stats = {
        "totalUsers": users.count(),
        "totalCustomers": by_role.get(Role.CUSTOMER, 0),
        "totalVendors": by_role.get(Role.VENDOR, 0),
        "recentUsers": users.filter(User.created_at >= since).count(),
        "vendorStats": _shop_counts(shops),
    }
    if district is None:
        stats["totalAdmins"] = by_role.get(Role.ADMIN, 0)
        stats["totalRegionalAdmins"] = by_role.get(Role.REGIONAL_ADMIN, 0)
    else:
        stats["district"] = district
    return stats


def _shop_counts(shops) -> dict:
    return {
        "total": shops.count(),
        "pending": _shop_status_filter(shops, "pending").count(),
        "approved": _shop_status_filter(shops, "approved").count(),
        "rejected": _shop_status_filter(shops, "rejected").count(),
    }


def list_vendors(identity: Identity, page=1, limit=10, status="all", search=""):
    district = _scope(identity)
    query = VendorShop.query.join(User, User.id == VendorShop.vendor_id)
    if district is not None:
        query = query.filter(VendorShop.district == district)
    query = _shop_status_filter(query, status)
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(VendorShop.name).like(pattern),
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )

    rows, pagination = paginate(query.order_by(VendorShop.created_at.desc()), page, limit)
    return [_vendor_row(s) for s in rows], pagination


def vendor_stats(identity: Identity) -> dict:
    district = _scope(identity)
    shops = VendorShop.query
    if district is not None:
        shops = shops.filter(VendorShop.district == district)
    stats = _shop_counts(shops)
    if district is not None:
        stats["district"] = district
    return stats



# -- dashboards ---------------------------------------------------------------

def _activity(kind, title, description, status, created_at):
    return {"type": kind, "title": title, "description": description, "status": status, "createdAt": created_at}


def _recent_activity() -> list:
    """Newest vendor registrations, orders and listings merged into one feed."""
    entries = [
        _activity("vendor_registration", "New vendor registration", shop.name, shop_status(shop), shop.created_at)
        for shop in VendorShop.query.order_by(VendorShop.created_at.desc()).limit(RECENT_LIMIT)
    ]
    entries += [
        _activity("order_placed", "New order", order.order_number, OrderStatus.parse(order.status).external, order.created_at)
        for order in Order.query.order_by(Order.created_at.desc()).limit(RECENT_LIMIT)
    ]
    entries += [
        _activity("product_listed", "New product listed", product.name, "active", product.created_at)
        for product in Product.query.order_by(Product.created_at.desc()).limit(RECENT_LIMIT)
    ]
    entries.sort(key=lambda e: e["createdAt"] or datetime.min, reverse=True)
    for entry in entries:
        entry["createdAt"] = iso(entry["createdAt"])
    return entries[:RECENT_LIMIT]


def admin_dashboard(identity: Identity) -> dict:
    ensure(identity, Requirement.of(Role.ADMIN))
    shops = _shop_counts(VendorShop.query)
    in_stock = Product.query.filter(Product.in_stock.is_(True))
    by_status = dict(db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all())
    revenue = Decimal(str(db.session.query(func.sum(Order.total_amount)).scalar() or 0))
    fee_rate = Decimal(str(current_app.config["PLATFORM_FEE_RATE"]))

    top_categories = (
        in_stock.with_entities(Product.category, func.count(Product.id))
        .group_by(Product.category)
        .order_by(func.count(Product.id).desc(), Product.category)
        .limit(RECENT_LIMIT)
        .all()
    )
    return {
        "totalVendors": User.query.filter(User.role == Role.VENDOR).count(),
        "pendingVendors": shops["pending"],
        "totalProducts": in_stock.count(),
        "totalOrders": sum(by_status.values()),
        "totalRevenue": money(revenue),
        "platformFee": money(revenue * fee_rate),
        "vendorDistribution": {k: shops[k] for k in ("approved", "pending", "rejected")},
        "orderStatus": {
            "delivered": by_status.get(OrderStatus.DELIVERED, 0),
            "inProgress": sum(by_status.get(s, 0) for s in IN_PROGRESS_STATUSES),
            "cancelled": by_status.get(OrderStatus.CANCELLED, 0),
        },
        "topCategories": [{"category": name or "Uncategorized", "count": n} for name, n in top_categories],
        "recentActivity": _recent_activity(),
    }


def regional_dashboard(identity: Identity) -> dict:
    ensure(identity, Requirement.of(Role.REGIONAL_ADMIN, district_scoped=True))
    district = identity.district
    users = User.query.filter(User.district == district, User.role.in_(REGIONAL_MANAGED_ROLES))
    shops = VendorShop.query.filter(VendorShop.district == district)
    counts = _shop_counts(shops)

    district_orders = Order.query.join(User, User.id == Order.customer_id).filter(User.district == district)
    delivered = district_orders.filter(Order.status == OrderStatus.DELIVERED)
    revenue = delivered.with_entities(func.sum(Order.total_amount)).scalar() or 0
    # approved shops with at least one product on an order
    active = _shop_status_filter(shops, "approved").filter(
        VendorShop.products.any(Product.id.in_(select(OrderItem.product_id)))
    )
    since = datetime.utcnow() - timedelta(days=RECENT_DAYS)

    recent = shops.order_by(VendorShop.created_at.desc()).limit(RECENT_LIMIT).all()
    return {
        "district": district,
        "stats": {
            "totalUsers": users.count(),
            "totalCustomers": users.filter(User.role == Role.CUSTOMER).count(),
            "totalVendors": counts["total"],
            "pendingVendors": counts["pending"],
            "approvedVendors": counts["approved"],
        },
        "recentVendors": [
            {
                "id": shop.id,
                "name": shop.name,
                "email": shop.vendor.email if shop.vendor else None,
                "status": shop_status(shop),
                "createdAt": iso(shop.created_at),
            }
            for shop in recent
        ],
        "districtStats": {
            "totalOrders": district_orders.count(),
            "totalRevenue": money(revenue),
            "activeVendors": active.count(),
            "recentActivity": users.filter(User.created_at >= since).count(),
        },
    }


def _next_month(start: datetime) -> datetime:
    return datetime(start.year + start.month // 12, start.month % 12 + 1, 1)


def _platform_month(start: datetime) -> dict:
    end = _next_month(start)
    in_month = Order.query.filter(Order.created_at >= start, Order.created_at < end)
    revenue = (
        in_month.filter(Order.status == OrderStatus.DELIVERED).with_entities(func.sum(Order.total_amount)).scalar()
        or 0
    )
    sold = (
        select(OrderItem.product_id)
        .join(Order, Order.id == OrderItem.order_id)
        .where(Order.created_at >= start, Order.created_at < end)
    )
    selling = _shop_status_filter(VendorShop.query, "approved").filter(VendorShop.products.any(Product.id.in_(sold)))
    return {
        "month": start.strftime("%b"),
        "year": start.year,
        "revenue": money(revenue),
        "orders": in_month.count(),
        "vendors": selling.count(),
    }


def _top_vendors() -> list:
    sales = dict(
        db.session.query(Product.vendor_id, func.sum(OrderItem.price * OrderItem.quantity))
        .join(OrderItem, OrderItem.product_id == Product.id)
        .group_by(Product.vendor_id)
        .all()
    )
    rows = [
        {
            "id": shop.id,
            "name": shop.name,
            "email": shop.vendor.email if shop.vendor else None,
            "totalProducts": len(shop.products),
            "totalSales": money(sales.get(shop.vendor_id) or 0),
        }
        for shop in _shop_status_filter(VendorShop.query, "approved")
    ]
    rows.sort(key=lambda r: (-r["totalSales"], -r["totalProducts"], r["name"]))
    return rows[:RECENT_LIMIT]


def admin_analytics(identity: Identity, now: datetime = None) -> dict:
    """Current-month revenue and orders against the month before, with a 6-month series."""
    ensure(identity, Requirement.of(Role.ADMIN))
    months = [_platform_month(start) for start in month_starts(now or datetime.utcnow(), ANALYTICS_MONTHS)]
    current, previous = months[-1], months[-2]
    fee_rate = Decimal(str(current_app.config["PLATFORM_FEE_RATE"]))
    approved = _shop_status_filter(VendorShop.query, "approved")
    return {
        "totalRevenue": current["revenue"],
        "platformFee": money(Decimal(str(current["revenue"])) * fee_rate),
        "totalOrders": current["orders"],
        "activeVendors": approved.filter(VendorShop.products.any()).count(),
        "pendingVendors": _shop_status_filter(VendorShop.query, "pending").count(),
        "totalProducts": Product.query.count(),
        "growthMetrics": {
            "revenueGrowth": growth_percent(current["revenue"], previous["revenue"]),
            "ordersGrowth": growth_percent(current["orders"], previous["orders"]),
        },
        "monthlyData": months,
        "topVendors": _top_vendors(),
    }
