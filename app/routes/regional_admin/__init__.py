from flask import Blueprint
from app.version import API_PREFIX
from app.utils import auth_required, role_required

regional_admin_bp = Blueprint("regional_admin", __name__, url_prefix=f"{API_PREFIX}/regional-admin")


@regional_admin_bp.before_request
@auth_required
@role_required("regional_admin", district_scoped=True)
def _enforce_regional_admin():
    """Ensure the requester is a regional admin with an assigned district."""
    return None

from . import users  # noqa: E402
from . import vendors  # noqa: E402
from . import dashboard  # noqa: E402
