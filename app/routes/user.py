from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.auth import ProfileUpdateRequest
from app.services import accounts
from app.utils import auth_required, ok, transactional
from app.utils.validation import validate_schema

user_bp = Blueprint("user", __name__, url_prefix=f"{API_PREFIX}/user")


@user_bp.route("/profile", methods=["GET"])
@auth_required
def get_profile():
    return ok(accounts.get_profile(g.identity))


@user_bp.route("/profile", methods=["PUT"])
@auth_required
@validate_schema(ProfileUpdateRequest)
def update_profile():
    """Update name, phone and district of the authenticated user."""
    data = request.validated_data.model_dump(exclude_unset=True)
    with transactional("Profile update failed"):
        profile = accounts.update_profile(g.identity, data)
    return ok(profile, message="Profile updated successfully")
