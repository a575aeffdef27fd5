from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.customer import FilterOptionsQuery, ShopProductsQuery, VendorDirectoryQuery
from app.services import catalog
from app.utils import auth_required, ok
from app.utils.validation import validate_query

shop_bp = Blueprint("shop", __name__, url_prefix=API_PREFIX)


@shop_bp.route("/shop/products", methods=["GET"])
@validate_query(ShopProductsQuery)
def list_products():
    """Public product listing limited to approved shops."""
    q = request.validated_query
    products, pagination = catalog.list_products(
        page=q.page,
        limit=q.limit,
        search=q.search,
        category=q.category,
        vendor=q.vendor,
        sort=q.sort,
    )
    return ok({"products": products, "pagination": pagination})


@shop_bp.route("/shop/products/filter-options", methods=["GET"])
@validate_query(FilterOptionsQuery)
def product_filter_options():
    return ok(catalog.filter_options(request.validated_query.category))


@shop_bp.route("/shop/products/<product_id>", methods=["GET"])
def get_product(product_id):
    return ok(catalog.get_product(product_id))


@shop_bp.route("/shop/categories", methods=["GET"])
def list_shop_categories():
    return ok({"categories": catalog.shop_categories()})


@shop_bp.route("/categories/with-images", methods=["GET"])
def list_categories_with_images():
    return ok(catalog.categories_with_images())


@shop_bp.route("/categories", methods=["GET"])
@auth_required
def list_categories():
    return ok({"categories": catalog.list_categories(g.identity)})


@shop_bp.route("/vendors", methods=["GET"])
@validate_query(VendorDirectoryQuery)
def list_vendors():
    """Public directory of approved vendor shops."""
    q = request.validated_query
    vendors, pagination = catalog.list_public_vendors(
        page=q.page,
        limit=q.limit,
        search=q.search,
        district=q.district,
        category=q.category,
    )
    return ok({"vendors": vendors, "pagination": pagination})


@shop_bp.route("/vendors/districts", methods=["GET"])
def list_vendor_districts():
    return ok(catalog.vendor_districts())


@shop_bp.route("/vendors/categories", methods=["GET"])
def list_vendor_categories():
    return ok(catalog.vendor_categories())
