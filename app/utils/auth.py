from functools import wraps
from flask import request, g
from app.auth.permissions import Identity, Requirement, authorize
from app.exceptions import Forbidden
from .responses import error
from .jwt import decode_token, TokenError
from models import db
from models.user import User


def _bearer_token():
    auth = request.headers.get("Authorization", "")
    if not auth:
        return None
    return auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if request.method == "OPTIONS":
            # CORS preflight never carries credentials
            return func(*args, **kwargs)
        token = _bearer_token()
        if not token:
            return error("Auth header missing", status=401)
        try:
            payload = decode_token(token, expected_type="access")
        except TokenError as e:
            return error(str(e), status=401)

        user = db.session.get(User, payload.get("sub"))
        if not user:
            return error("Unauthorized - Please log in", status=401)
        g.identity = Identity.from_user(user)
        return func(*args, **kwargs)

    return wrapper


def _to_list(obj):
    return list(obj) if isinstance(obj, (list, tuple, set)) else [obj]


def role_required(required, district_scoped=False):
    """Authorize based on user role or scoped action (``"vendor:update_order_status"``)."""
    entries = _to_list(required)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if request.method == "OPTIONS":
                return fn(*args, **kwargs)
            identity = getattr(g, "identity", None)
            decisions = []
            for entry in entries:
                role, _, action = str(entry).partition(":")
                decisions.append(authorize(
                    identity,
                    Requirement.of(role, action=action or None, district_scoped=district_scoped),
                ))
            if not any(decisions):
                # a missing session or district outranks a plain role mismatch
                denied = next((d for d in decisions if d.error is not Forbidden), decisions[0])
                return error(denied.reason, status=denied.error.status_code)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
