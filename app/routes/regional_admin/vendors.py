from flask import request, g
from app.schemas.admin import VendorsQuery
from app.services import directory, vendor_lifecycle
from app.services.shaping import shop_dto
from app.utils import ok, transactional
from app.utils.validation import validate_query
from . import regional_admin_bp


@regional_admin_bp.route("/vendors", methods=["GET"])
@validate_query(VendorsQuery)
def list_district_vendors():
    q = request.validated_query
    vendors, pagination = directory.list_vendors(g.identity, q.page, q.limit, status=q.status, search=q.search)
    return ok({"vendors": vendors, "pagination": pagination, "district": g.identity.district})


@regional_admin_bp.route("/vendors/stats", methods=["GET"])
def district_vendor_stats():
    return ok(directory.vendor_stats(g.identity))


@regional_admin_bp.route("/vendors/<shop_id>/approve", methods=["POST", "PATCH"])
def approve_district_vendor(shop_id):
    with transactional("Vendor approval failed"):
        shop = vendor_lifecycle.approve(shop_id, g.identity)
        data = shop_dto(shop)
    return ok(data, message="Vendor approved successfully")


@regional_admin_bp.route("/vendors/<shop_id>/reject", methods=["POST", "PATCH"])
def reject_district_vendor(shop_id):
    with transactional("Vendor rejection failed"):
        shop = vendor_lifecycle.reject(shop_id, g.identity)
        data = shop_dto(shop)
    return ok(data, message="Vendor rejected successfully")
