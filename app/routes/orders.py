from flask import Blueprint, request, g, current_app
from flask_limiter.util import get_remote_address
from app.version import API_PREFIX
from extensions import limiter
from app.schemas.admin import PageQuery
from app.schemas.customer import CheckoutRequest
from app.services import checkout
from app.utils import auth_required, role_required, ok, transactional
from app.utils.validation import validate_schema, validate_query

orders_bp = Blueprint("orders", __name__, url_prefix=f"{API_PREFIX}/orders")


@orders_bp.route("", methods=["POST"])
@limiter.limit(lambda: current_app.config["ORDER_LIMIT_PER_IP"], key_func=get_remote_address, error_message="Too many orders from this IP")
@auth_required
@role_required("customer:place_order")
@validate_schema(CheckoutRequest)
def place_order():
    payload = request.validated_data.model_dump()
    with transactional("Order creation failed"):
        order = checkout.place_order(g.identity, payload)
    return ok(order, message="Order placed successfully", status=201)


@orders_bp.route("", methods=["GET"])
@auth_required
@validate_query(PageQuery)
def list_orders():
    q = request.validated_query
    orders, pagination = checkout.list_orders(g.identity, q.page, q.limit)
    return ok({"orders": orders, "pagination": pagination})


@orders_bp.route("/<order_id>", methods=["GET"])
@auth_required
def get_order(order_id):
    return ok(checkout.get_order(g.identity, order_id))
