from flask import request, g
from app.schemas.admin import RoleUpdateRequest, UsersQuery
from app.services import directory, vendor_lifecycle
from app.services.shaping import user_dto
from app.utils import ok, transactional
from app.utils.validation import validate_schema, validate_query
from . import regional_admin_bp


@regional_admin_bp.route("/users", methods=["GET"])
@validate_query(UsersQuery)
def list_district_users():
    """Customers and vendors registered in the admin's district."""
    q = request.validated_query
    users, pagination = directory.list_users(g.identity, q.page, q.limit, role=q.role, search=q.search)
    return ok({"users": users, "pagination": pagination, "district": g.identity.district})


@regional_admin_bp.route("/users/stats", methods=["GET"])
def district_user_stats():
    return ok(directory.user_stats(g.identity))


@regional_admin_bp.route("/users/<user_id>/role", methods=["PATCH"])
@validate_schema(RoleUpdateRequest)
def update_district_user_role(user_id):
    new_role = request.validated_data.role
    with transactional("Role update failed"):
        user = vendor_lifecycle.change_role(user_id, new_role, g.identity)
        data = user_dto(user)
    return ok(data, message=f"User role updated to {new_role.external}")
