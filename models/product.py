from datetime import datetime
from models import db
from models.user import _uuid


class Category(db.Model):
    __tablename__ = "category"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(500), nullable=True)
    image = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = db.relationship("Product", back_populates="category_ref", lazy=True)


class Product(db.Model):
    __tablename__ = "product"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    vendor_id = db.Column(db.String(36), db.ForeignKey("user.id"), nullable=False, index=True)
    # Detached (NULL) while the owner is not a vendor
    shop_id = db.Column(db.String(36), db.ForeignKey("vendor_shop.id"), nullable=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(12, 2), nullable=False)

    # Legacy free-text category kept next to the managed one
    category = db.Column(db.String(100), nullable=True)
    category_id = db.Column(db.String(36), db.ForeignKey("category.id"), nullable=True)

    # Free-text attributes behind the storefront filter options
    size = db.Column(db.String(50), nullable=True)
    color = db.Column(db.String(50), nullable=True)
    material = db.Column(db.String(100), nullable=True)
    brand = db.Column(db.String(100), nullable=True)

    stock_count = db.Column(db.Integer, default=0, nullable=False)
    in_stock = db.Column(db.Boolean, default=False, nullable=False)
    images = db.Column(db.JSON, default=list)
    rating = db.Column(db.Float, nullable=True)
    reviews = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = db.relationship("User")
    shop = db.relationship("VendorShop", back_populates="products")
    category_ref = db.relationship("Category", back_populates="products")

    def set_stock(self, count: int):
        self.stock_count = count
        self.in_stock = count > 0
