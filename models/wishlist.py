from datetime import datetime
from models import db
from models.user import _uuid


class Wishlist(db.Model):
    __tablename__ = "wishlist"
    __table_args__ = (
        db.UniqueConstraint("customer_id", "product_id", name="uq_wishlist_customer_product"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    customer_id = db.Column(db.String(36), db.ForeignKey("user.id"), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey("product.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    product = db.relationship("Product")
