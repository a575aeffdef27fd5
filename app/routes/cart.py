from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.customer import CartAddRequest, CartUpdateRequest
from app.services import cart as cart_service
from app.utils import auth_required, role_required, ok, transactional
from app.utils.validation import validate_schema

cart_bp = Blueprint("cart", __name__, url_prefix=f"{API_PREFIX}/cart")


@cart_bp.before_request
@auth_required
@role_required("customer:manage_cart")
def _enforce_customer_role():
    return None


@cart_bp.route("", methods=["GET"])
def get_cart():
    return ok({"items": cart_service.list_items(g.identity)})


@cart_bp.route("", methods=["POST"])
@validate_schema(CartAddRequest)
def add_to_cart():
    body = request.validated_data
    with transactional("Failed to add item to cart"):
        item = cart_service.add_item(g.identity, body.productId, body.quantity)
    return ok(item, message="Item added to cart")


@cart_bp.route("/<item_id>", methods=["PUT", "PATCH"])
@validate_schema(CartUpdateRequest)
def update_cart_item(item_id):
    """Set the quantity of one cart line; it may not exceed the product's stock."""
    with transactional("Failed to update cart item"):
        item = cart_service.update_quantity(g.identity, item_id, request.validated_data.quantity)
    return ok(item, message="Cart updated")


@cart_bp.route("/<item_id>", methods=["DELETE"])
def remove_cart_item(item_id):
    with transactional("Failed to remove cart item"):
        cart_service.remove_item(g.identity, item_id)
    return ok(message="Item removed from cart")


@cart_bp.route("", methods=["DELETE"])
@cart_bp.route("/clear", methods=["POST"])
def clear_cart():
    with transactional("Failed to clear cart"):
        removed = cart_service.clear(g.identity)
    return ok({"removed": removed}, message="Cart cleared")
