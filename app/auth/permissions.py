"""
Authorization guard shared by every route and service.

``authorize`` is a pure decision function over an explicit ``Identity``; it
never touches the database. ``ensure`` raises the matching domain error so
services can call it before any read or write.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Type

from app.exceptions import (
    ConfigurationError,
    Forbidden,
    MarketplaceError,
    Unauthenticated,
    ValidationError,
)
from models.enums import Role

# Central registry of allowed actions per role.
ROLE_SCOPES = {
    Role.CUSTOMER: {"manage_cart", "manage_wishlist", "place_order"},
    Role.VENDOR: {"manage_products", "update_order_status"},
    Role.REGIONAL_ADMIN: {"approve_vendor", "reject_vendor", "change_role"},
    Role.ADMIN: {"*"},
}


def role_has_scope(role: Role, action: str) -> bool:
    scopes = ROLE_SCOPES.get(role, set())
    return "*" in scopes or action in scopes


@dataclass(frozen=True)
class Identity:
    """Resolved caller, passed explicitly into every operation."""

    user_id: str
    email: str
    role: Role
    district: Optional[str] = None
    first_name: str = ""
    last_name: str = ""

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(
            user_id=user.id,
            email=user.email,
            role=Role.parse(user.role),
            district=user.district,
            first_name=user.first_name or "",
            last_name=user.last_name or "",
        )


@dataclass(frozen=True)
class Requirement:
    roles: FrozenSet[Role]
    action: Optional[str] = None
    district_scoped: bool = False
    target_user_id: Optional[str] = None

    @classmethod
    def of(cls, roles, action=None, district_scoped=False, target_user_id=None):
        if isinstance(roles, (Role, str)):
            roles = [roles]
        return cls(
            roles=frozenset(Role.parse(r) for r in roles),
            action=action,
            district_scoped=district_scoped,
            target_user_id=target_user_id,
        )


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None
    error: Optional[Type[MarketplaceError]] = field(default=None, compare=False)

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str, error: Type[MarketplaceError]) -> "Decision":
        return cls(False, reason, error)

    def __bool__(self):
        return self.allowed


def authorize(identity: Optional[Identity], requirement: Requirement) -> Decision:
    if identity is None:
        return Decision.deny("Unauthorized - Please log in", Unauthenticated)
    if identity.role not in requirement.roles:
        return Decision.deny("forbidden", Forbidden)
    if requirement.action and not role_has_scope(identity.role, requirement.action):
        return Decision.deny("forbidden", Forbidden)
    if requirement.target_user_id is not None and requirement.target_user_id == identity.user_id:
        return Decision.deny("Cannot modify your own role", ValidationError)
    if (
        requirement.district_scoped
        and identity.role == Role.REGIONAL_ADMIN
        and not identity.district
    ):
        return Decision.deny("No district assigned to regional admin", ConfigurationError)
    return Decision.allow()


def ensure(identity: Optional[Identity], requirement: Requirement) -> Identity:
    decision = authorize(identity, requirement)
    if not decision:
        raise decision.error(decision.reason)
    return identity


def district_scope(identity: Identity) -> Optional[str]:
    """District rows must match for this caller; ``None`` means unscoped."""
    if identity.role == Role.REGIONAL_ADMIN:
        if not identity.district:
            raise ConfigurationError()
        return identity.district
    return None


def roles_of(values: Iterable) -> FrozenSet[Role]:
    return frozenset(Role.parse(v) for v in values)
