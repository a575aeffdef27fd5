"""
Response shaping: internal rows to client-facing dictionaries.

Enum values leave the system lower-cased here and nowhere else. Anything that
renders an order for a vendor goes through ``vendor_order_view`` so another
vendor's lines and totals never leak.
"""
import json
from decimal import Decimal

from app.exceptions import ValidationError
from models.enums import OrderStatus, Role

PLACEHOLDER_IMAGE = "/placeholder.svg"


def money(value) -> float:
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.01")))


def iso(dt):
    return dt.isoformat() if dt else None


def first_image(product):
    images = product.images or []
    return images[0] if images else PLACEHOLDER_IMAGE


def shop_status(shop) -> str:
    if shop.is_rejected:
        return "rejected"
    if shop.is_approved:
        return "approved"
    return "pending"


def parse_shipping_address(raw):
    if raw is None or isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError("Stored shipping address is not valid JSON")
    if not isinstance(parsed, dict):
        raise ValidationError("Stored shipping address is not valid JSON")
    return parsed


def user_dto(user):
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "phone": user.phone,
        "role": Role.parse(user.role).value,
        "district": user.district,
        "createdAt": iso(user.created_at),
        "updatedAt": iso(user.updated_at),
    }


def shop_dto(shop):
    return {
        "id": shop.id,
        "vendorId": shop.vendor_id,
        "name": shop.name,
        "description": shop.description,
        "district": shop.district,
        "logo": shop.logo,
        "isApproved": shop.is_approved,
        "isRejected": shop.is_rejected,
        "rejectedAt": iso(shop.rejected_at),
        "rejectedBy": shop.rejected_by,
        "status": shop_status(shop),
    }


def category_dto(category, product_count=None):
    data = {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "image": category.image,
        "isActive": category.is_active,
        "createdAt": iso(category.created_at),
        "updatedAt": iso(category.updated_at),
    }
    if product_count is not None:
        data["productCount"] = product_count
    return data


def product_dto(product):
    shop = product.shop
    vendor = product.vendor
    vendor_name = (shop.name if shop else None) or (vendor.full_name if vendor else "") or "Vendor"
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": money(product.price),
        "images": product.images or [PLACEHOLDER_IMAGE],
        "category": product.category_ref.name if product.category_ref else product.category,
        "categoryId": product.category_id,
        "size": product.size,
        "color": product.color,
        "material": product.material,
        "brand": product.brand,
        "inStock": product.in_stock,
        "stockCount": product.stock_count,
        "rating": product.rating,
        "reviews": product.reviews,
        "vendorId": product.vendor_id,
        "vendorName": vendor_name,
        "createdAt": iso(product.created_at),
        "updatedAt": iso(product.updated_at),
    }


def public_vendor_dto(shop, total_sales=0, total_revenue=0):
    products = list(shop.products)
    vendor = shop.vendor
    return {
        "id": shop.id,
        "name": shop.name,
        "description": shop.description or "No description available",
        "location": shop.district,
        "status": shop_status(shop),
        "totalSales": total_sales,
        "totalRevenue": money(total_revenue),
        "totalProducts": len(products),
        "categories": list(dict.fromkeys(p.category for p in products if p.category)),
        "joinedDate": iso(vendor.created_at if vendor else shop.created_at),
        "logo": shop.logo,
    }


def cart_item_dto(item):
    product = item.product
    return {
        "id": item.id,
        "productId": item.product_id,
        "name": product.name,
        "price": money(product.price),
        "image": first_image(product),
        "vendorId": product.vendor_id,
        "vendorName": product.shop.name if product.shop else "Vendor",
        "quantity": item.quantity,
        "inStock": product.in_stock,
        "maxStock": product.stock_count,
    }


def wishlist_item_dto(entry):
    return {
        "id": entry.id,
        "productId": entry.product_id,
        "createdAt": iso(entry.created_at),
        "product": product_dto(entry.product),
    }


def order_item_dto(item):
    product = item.product
    return {
        "id": item.id,
        "productId": item.product_id,
        "productName": product.name if product else None,
        "images": (product.images or []) if product else [],
        "vendorId": product.vendor_id if product else None,
        "price": money(item.price),
        "quantity": item.quantity,
    }


def vendor_items(order, vendor_id):
    return [oi for oi in order.items if oi.product is not None and oi.product.vendor_id == vendor_id]


def vendor_total(order, vendor_id) -> Decimal:
    return sum(
        (Decimal(str(oi.price)) * oi.quantity for oi in vendor_items(order, vendor_id)),
        Decimal("0"),
    )


def vendor_order_view(order, vendor_id):
    customer = order.customer
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "status": OrderStatus.parse(order.status).external,
        "totalAmount": money(vendor_total(order, vendor_id)),
        "createdAt": iso(order.created_at),
        "updatedAt": iso(order.updated_at),
        "customer": {
            "id": customer.id,
            "firstName": customer.first_name,
            "lastName": customer.last_name,
            "email": customer.email,
        },
        "shippingAddress": parse_shipping_address(order.shipping_address),
        "district": order.district,
        "items": [order_item_dto(oi) for oi in vendor_items(order, vendor_id)],
    }


def customer_order_dto(order, parse_address=False):
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "status": OrderStatus.parse(order.status).value,
        "subtotal": money(order.subtotal),
        "shippingCost": money(order.shipping_cost),
        "totalAmount": money(order.total_amount),
        "shippingAddress": (
            parse_shipping_address(order.shipping_address) if parse_address else order.shipping_address
        ),
        "district": order.district,
        "shippingMethod": order.shipping_method,
        "paymentMethod": order.payment_method,
        "specialInstructions": order.special_instructions,
        "createdAt": iso(order.created_at),
        "updatedAt": iso(order.updated_at),
        "items": [order_item_dto(oi) for oi in order.items],
    }
