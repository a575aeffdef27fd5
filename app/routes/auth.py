from flask import Blueprint, request, current_app
from flask_limiter.util import get_remote_address
from app.version import API_PREFIX
from extensions import limiter
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from app.services import accounts
from app.utils import ok, error, transactional
from app.utils.validation import validate_schema

auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")


@auth_bp.route("/register", methods=["POST"])
@validate_schema(RegisterRequest)
def register():
    """Create a customer, vendor or admin account."""
    data = request.validated_data.model_dump()
    with transactional("Registration failed"):
        user = accounts.register(data)
    return ok(user, message="User registered successfully", status=201)


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(lambda: current_app.config["LOGIN_LIMIT_PER_IP"], key_func=get_remote_address, error_message="Too many login attempts from this IP")
@validate_schema(LoginRequest)
def login():
    body = request.validated_data
    result = accounts.login(body.email, body.password, role=body.role)
    result["expires_in"] = current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60
    return ok(result)


@auth_bp.route("/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    result = accounts.refresh(request.validated_data.refresh_token)
    result["expires_in"] = current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60
    return ok(result)


@auth_bp.route("/forgot-password", methods=["POST"])
@limiter.limit(lambda: current_app.config["PASSWORD_RESET_LIMIT_PER_IP"], key_func=get_remote_address, error_message="Too many password reset requests from this IP")
@validate_schema(ForgotPasswordRequest)
def forgot_password():
    """Start a password reset; the response is the same for unknown emails."""
    with transactional("Failed to process password reset request"):
        message = accounts.forgot_password(request.validated_data.email)
    return ok(message=message)


@auth_bp.route("/validate-reset-token", methods=["GET"])
def validate_reset_token():
    token = request.args.get("token", "")
    if not token:
        return error("Token is required", status=400)
    return ok({"valid": accounts.validate_reset_token(token)})


@auth_bp.route("/reset-password", methods=["POST"])
@validate_schema(ResetPasswordRequest)
def reset_password():
    body = request.validated_data
    with transactional("Password reset failed"):
        accounts.reset_password(body.token, body.password)
    return ok(message="Password has been reset successfully")
