from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Re-export common models for convenience
from .enums import Role, OrderStatus  # noqa: F401,E402
from .user import User  # noqa: F401,E402
from .shop import VendorShop  # noqa: F401,E402
from .product import Product, Category  # noqa: F401,E402
from .cart import CartItem  # noqa: F401,E402
from .order import Order, OrderItem  # noqa: F401,E402
from .wishlist import Wishlist  # noqa: F401,E402
