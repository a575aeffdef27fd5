"""
Account registration, sign-in and password reset.
"""
import logging
import secrets
from datetime import datetime, timedelta

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from app.auth.permissions import Identity
from app.exceptions import (
    DuplicateAccountError,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from app.services import vendor_lifecycle
from app.services.shaping import shop_dto, user_dto
from app.utils.jwt import TokenError, create_access_token, create_refresh_token, decode_token
from models import db
from models.enums import Role
from models.user import User

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent."
DISTRICT_REQUIRED_ROLES = (Role.VENDOR, Role.REGIONAL_ADMIN)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _parse_role(value, default=Role.CUSTOMER) -> Role:
    if not value:
        return default
    try:
        return Role.parse(value)
    except ValueError:
        raise ValidationError("Invalid role. Must be one of: customer, vendor, admin, regional_admin")


def _clean(value):
    value = (value or "").strip()
    return value or None


def register(data: dict) -> dict:
    role = _parse_role(data.get("role"))
    district = _clean(data.get("district"))
    if role in DISTRICT_REQUIRED_ROLES and not district:
        raise ValidationError(f"{role.external} accounts require a district")

    email = _normalize_email(data["email"])
    if User.query.filter_by(email=email).first():
        raise DuplicateAccountError()

    user = User(
        email=email,
        password_hash=generate_password_hash(data["password"]),
        first_name=data["firstName"].strip(),
        last_name=data["lastName"].strip(),
        phone=_clean(data.get("phone")),
        district=district,
        role=role,
    )
    db.session.add(user)
    db.session.flush()

    if role == Role.VENDOR:
        vendor_lifecycle.create_default_shop(
            user,
            name=_clean(data.get("businessName")),
            description=_clean(data.get("businessDescription")),
        )
        db.session.flush()

    logger.info("registered user %s as %s", user.id, role.value)
    result = user_dto(user)
    if user.vendor_shop is not None:
        result["vendorShop"] = shop_dto(user.vendor_shop)
    return result


def _issue_tokens(user: User) -> dict:
    role = Role.parse(user.role)
    return {
        "access_token": create_access_token(user.id, user.email, role.value),
        "refresh_token": create_refresh_token(user.id),
        "user": user_dto(user),
    }


def login(email: str, password: str, role=None) -> dict:
    user = User.query.filter_by(email=_normalize_email(email)).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise Unauthenticated("Invalid email or password")

    if role:
        requested = _parse_role(role)
        if requested != Role.parse(user.role):
            raise Forbidden(f"This account is not registered as {requested.external}")

    logger.info("user %s logged in", user.id)
    return _issue_tokens(user)


def refresh(refresh_token: str) -> dict:
    try:
        payload = decode_token(refresh_token, expected_type="refresh")
    except TokenError as e:
        raise Unauthenticated(str(e))
    user = db.session.get(User, payload.get("sub"))
    if not user:
        raise Unauthenticated("Unauthorized - Please log in")
    return _issue_tokens(user)


def forgot_password(email: str) -> str:
    """Start a reset for ``email``; the response never reveals whether it exists."""
    user = User.query.filter_by(email=_normalize_email(email)).first()
    if user is None:
        logger.info("password reset requested for unknown account")
        return RESET_REQUESTED_MESSAGE

    ttl = current_app.config["PASSWORD_RESET_TOKEN_TTL_MIN"]
    user.reset_token = secrets.token_hex(32)
    user.reset_token_expiry = datetime.utcnow() + timedelta(minutes=ttl)

    link = f"{current_app.config['FRONTEND_URL'].rstrip('/')}/reset-password?token={user.reset_token}"
    # no mail transport; the link is only logged
    logger.info("password reset link for user %s: %s", user.id, link)
    return RESET_REQUESTED_MESSAGE


def _user_for_reset_token(token: str):
    if not token:
        return None
    user = User.query.filter_by(reset_token=token).first()
    if user is None or user.reset_token_expiry is None:
        return None
    if user.reset_token_expiry <= datetime.utcnow():
        return None
    return user


def validate_reset_token(token: str) -> bool:
    return _user_for_reset_token(token) is not None


def reset_password(token: str, password: str) -> None:
    user = _user_for_reset_token(token)
    if user is None:
        raise ValidationError("Invalid or expired reset token")

    user.password_hash = generate_password_hash(password)
    user.reset_token = None
    user.reset_token_expiry = None
    logger.info("password reset completed for user %s", user.id)


def _load_self(identity: Identity) -> User:
    if identity is None:
        raise Unauthenticated()
    user = db.session.get(User, identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def get_profile(identity: Identity) -> dict:
    user = _load_self(identity)
    result = user_dto(user)
    if user.vendor_shop is not None:
        result["vendorShop"] = shop_dto(user.vendor_shop)
    return result


def update_profile(identity: Identity, data: dict) -> dict:
    user = _load_self(identity)
    user.first_name = data["firstName"].strip()
    user.last_name = data["lastName"].strip()
    if "phone" in data:
        user.phone = _clean(data.get("phone"))
    if "district" in data and data.get("district") is not None:
        user.district = _clean(data["district"])
    user.updated_at = datetime.utcnow()
    return user_dto(user)
