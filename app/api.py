from app.routes import (
    auth_bp,
    user_bp,
    admin_bp,
    regional_admin_bp,
    vendor_bp,
    cart_bp,
    customer_bp,
    wishlist_bp,
    orders_bp,
    shop_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(regional_admin_bp)
    app.register_blueprint(vendor_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(wishlist_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(shop_bp)
