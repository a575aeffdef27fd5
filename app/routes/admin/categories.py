from flask import request, g
from app.schemas.admin import CategoryCreateRequest, CategoryPatchRequest
from app.services import catalog
from app.utils import ok, transactional
from app.utils.validation import validate_schema
from . import admin_bp


@admin_bp.route("/categories", methods=["GET"])
def list_categories():
    return ok({"categories": catalog.list_categories(g.identity)})


@admin_bp.route("/categories", methods=["POST"])
@validate_schema(CategoryCreateRequest)
def create_category():
    data = request.validated_data.model_dump()
    with transactional("Category creation failed"):
        category = catalog.create_category(g.identity, data)
    return ok(category, message="Category created successfully", status=201)


@admin_bp.route("/categories/<category_id>", methods=["GET"])
def get_category(category_id):
    return ok(catalog.get_category(g.identity, category_id))


@admin_bp.route("/categories/<category_id>", methods=["PUT"])
@validate_schema(CategoryCreateRequest)
def replace_category(category_id):
    data = request.validated_data.model_dump()
    with transactional("Category update failed"):
        category = catalog.update_category(g.identity, category_id, data)
    return ok(category, message="Category updated successfully")


@admin_bp.route("/categories/<category_id>", methods=["PATCH"])
@validate_schema(CategoryPatchRequest)
def patch_category(category_id):
    data = request.validated_data.model_dump(exclude_unset=True)
    with transactional("Category update failed"):
        category = catalog.update_category(g.identity, category_id, data)
    return ok(category, message="Category updated successfully")


@admin_bp.route("/categories/<category_id>", methods=["DELETE"])
def delete_category(category_id):
    with transactional("Category deletion failed"):
        catalog.delete_category(g.identity, category_id)
    return ok(message="Category deleted successfully")
