from .auth import auth_bp
from .user import user_bp
from .admin import admin_bp
from .regional_admin import regional_admin_bp
from .vendor import vendor_bp
from .cart import cart_bp
from .customer import customer_bp, wishlist_bp
from .orders import orders_bp
from .shop import shop_bp


__all__ = [
    'auth_bp',
    'user_bp',
    'admin_bp',
    'regional_admin_bp',
    'vendor_bp',
    'cart_bp',
    'customer_bp',
    'wishlist_bp',
    'orders_bp',
    'shop_bp',
]
