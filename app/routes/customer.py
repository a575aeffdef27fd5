from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.customer import WishlistAddRequest, CustomerOrdersQuery
from app.services import checkout, wishlist
from app.utils import auth_required, role_required, ok, transactional
from app.utils.validation import validate_schema, validate_query

customer_bp = Blueprint("customer", __name__, url_prefix=f"{API_PREFIX}/customer")


@customer_bp.before_request
@auth_required
def _require_login():
    return None


@customer_bp.route("/wishlist", methods=["GET"])
@role_required("customer:manage_wishlist")
def get_wishlist():
    return ok(wishlist.list_items(g.identity))


@customer_bp.route("/wishlist", methods=["POST"])
@role_required("customer:manage_wishlist")
@validate_schema(WishlistAddRequest)
def add_to_wishlist():
    with transactional("Failed to add to wishlist"):
        entry = wishlist.add_item(g.identity, request.validated_data.productId)
    return ok(entry, message="Added to wishlist", status=201)


@customer_bp.route("/wishlist/<entry_id>", methods=["DELETE"])
@role_required("customer:manage_wishlist")
def remove_from_wishlist(entry_id):
    with transactional("Failed to remove from wishlist"):
        wishlist.remove_item(g.identity, entry_id)
    return ok(message="Removed from wishlist")


@customer_bp.route("/orders", methods=["GET"])
@validate_query(CustomerOrdersQuery)
def list_orders():
    """The caller's own orders, optionally filtered by status."""
    q = request.validated_query
    orders, pagination = checkout.list_orders(g.identity, q.page, q.limit, status=q.status)
    return ok({"orders": orders, "pagination": pagination})


# Short aliases for the wishlist endpoints
wishlist_bp = Blueprint("wishlist", __name__, url_prefix=f"{API_PREFIX}/wishlist")
wishlist_bp.before_request(_require_login)
wishlist_bp.add_url_rule("", "get_wishlist", get_wishlist, methods=["GET"])
wishlist_bp.add_url_rule("", "add_to_wishlist", add_to_wishlist, methods=["POST"])
wishlist_bp.add_url_rule("/<entry_id>", "remove_from_wishlist", remove_from_wishlist, methods=["DELETE"])
