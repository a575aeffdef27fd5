from flask import request, g
from app.schemas.admin import VendorsQuery
from app.services import directory, vendor_lifecycle
from app.services.shaping import shop_dto
from app.utils import ok, transactional
from app.utils.validation import validate_query
from . import admin_bp


@admin_bp.route("/vendors", methods=["GET"])
@validate_query(VendorsQuery)
def list_vendors():
    q = request.validated_query
    vendors, pagination = directory.list_vendors(g.identity, q.page, q.limit, status=q.status, search=q.search)
    return ok({"vendors": vendors, "pagination": pagination})


@admin_bp.route("/vendors/<shop_id>/approve", methods=["POST", "PATCH"])
def approve_vendor(shop_id):
    with transactional("Vendor approval failed"):
        shop = vendor_lifecycle.approve(shop_id, g.identity)
        data = shop_dto(shop)
    return ok(data, message="Vendor approved successfully")


@admin_bp.route("/vendors/<shop_id>/reject", methods=["POST", "PATCH"])
def reject_vendor(shop_id):
    with transactional("Vendor rejection failed"):
        shop = vendor_lifecycle.reject(shop_id, g.identity)
        data = shop_dto(shop)
    return ok(data, message="Vendor rejected successfully")
