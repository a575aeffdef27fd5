"""
Vendor shop approval states and the role/shop coupling.

A user holds the VENDOR role if and only if exactly one VendorShop references
them. ``change_role`` is the only path that mutates ``User.role`` after
registration, and it keeps that invariant inside the caller's transaction.
"""
import logging
from datetime import datetime
from typing import Optional

from app.auth.permissions import Identity, Requirement, district_scope, ensure
from app import metrics
from app.exceptions import ConflictError, Forbidden, NotFound
from models import db
from models.enums import REGIONAL_MANAGED_ROLES, Role
from models.product import Product
from models.shop import VendorShop
from models.user import User

logger = logging.getLogger(__name__)

DEFAULT_DISTRICT = "Not specified"

_ADMINS = (Role.ADMIN, Role.REGIONAL_ADMIN)


def _load_scoped_shop(shop_id: str, actor: Identity) -> VendorShop:
    district = district_scope(actor)
    query = VendorShop.query.filter_by(id=shop_id)
    if district is not None:
        query = query.filter(VendorShop.district == district)
    shop = query.with_for_update().first()
    if not shop:
        message = "Vendor not found in your district" if district else "Vendor shop not found"
        raise NotFound(message)
    return shop


def approve(shop_id: str, actor: Identity) -> VendorShop:
    ensure(actor, Requirement.of(_ADMINS, action="approve_vendor", district_scoped=True))
    shop = _load_scoped_shop(shop_id, actor)
    if shop.is_approved and not shop.is_rejected:
        raise ConflictError("This vendor has already been approved")
    shop.is_approved = True
    shop.is_rejected = False
    shop.rejected_at = None
    shop.rejected_by = None
    logger.info("vendor shop %s approved by %s", shop.id, actor.user_id)
    metrics.VENDOR_DECISIONS.labels("approved").inc()
    return shop


def reject(shop_id: str, actor: Identity) -> VendorShop:
    ensure(actor, Requirement.of(_ADMINS, action="reject_vendor", district_scoped=True))
    shop = _load_scoped_shop(shop_id, actor)
    if shop.is_rejected:
        raise ConflictError("This vendor has already been rejected")
    shop.is_approved = False
    shop.is_rejected = True
    shop.rejected_at = datetime.utcnow()
    shop.rejected_by = actor.user_id
    logger.info("vendor shop %s rejected by %s", shop.id, actor.user_id)
    metrics.VENDOR_DECISIONS.labels("rejected").inc()
    return shop


def create_default_shop(user: User, name: Optional[str] = None, description: Optional[str] = None) -> VendorShop:
    shop = VendorShop(
        vendor_id=user.id,
        name=name or f"{user.first_name}'s Shop",
        description=description or f"Shop for {user.first_name} {user.last_name}",
        district=user.district or DEFAULT_DISTRICT,
    )
    db.session.add(shop)
    user.vendor_shop = shop
    return shop


def on_role_change(user: User, old_role: Role, new_role: Role, actor: Identity) -> None:
    old_role, new_role = Role.parse(old_role), Role.parse(new_role)
    if old_role == Role.VENDOR and new_role != Role.VENDOR:
        if user.vendor_shop is not None:
            logger.info("removing shop %s of user %s (actor %s)", user.vendor_shop.id, user.id, actor.user_id)
            db.session.delete(user.vendor_shop)
            user.vendor_shop = None
    elif new_role == Role.VENDOR and old_role != Role.VENDOR:
        existing = VendorShop.query.filter_by(vendor_id=user.id).first()
        if existing is None:
            shop = create_default_shop(user)
            db.session.flush()
            # products left behind by an earlier shop move to the new one
            Product.query.filter_by(vendor_id=user.id, shop_id=None).update({"shop_id": shop.id})
            logger.info("created default shop for user %s (actor %s)", user.id, actor.user_id)


def change_role(target_user_id: str, new_role, actor: Identity) -> User:
    new_role = Role.parse(new_role)
    ensure(
        actor,
        Requirement.of(_ADMINS, action="change_role", district_scoped=True, target_user_id=target_user_id),
    )
    district = district_scope(actor)
    query = User.query.filter_by(id=target_user_id)
    if district is not None:
        query = query.filter(User.district == district, User.role.in_(REGIONAL_MANAGED_ROLES))
    user = query.with_for_update().first()
    if not user:
        raise NotFound("User not found")
    if district is not None and new_role not in REGIONAL_MANAGED_ROLES:
        raise Forbidden("Regional admins may only assign customer or vendor roles")

    old_role = Role.parse(user.role)
    on_role_change(user, old_role, new_role, actor)
    user.role = new_role
    user.updated_at = datetime.utcnow()
    logger.info("user %s role %s -> %s by %s", user.id, old_role.value, new_role.value, actor.user_id)
    metrics.ROLE_CHANGES.labels(old_role.value, new_role.value).inc()
    return user


__all__ = [
    "approve",
    "reject",
    "on_role_change",
    "change_role",
    "create_default_shop",
]
