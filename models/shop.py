from datetime import datetime
from models import db
from models.user import _uuid


class VendorShop(db.Model):
    __tablename__ = "vendor_shop"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    vendor_id = db.Column(db.String(36), db.ForeignKey("user.id"), unique=True, nullable=False)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    district = db.Column(db.String(100), nullable=True, index=True)
    logo = db.Column(db.String(255), nullable=True)

    # Approval state: pending (neither flag), approved, or rejected
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    is_rejected = db.Column(db.Boolean, default=False, nullable=False)
    rejected_at = db.Column(db.DateTime, nullable=True)
    rejected_by = db.Column(db.String(36), db.ForeignKey("user.id"), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = db.relationship("User", back_populates="vendor_shop", foreign_keys=[vendor_id])
    products = db.relationship("Product", back_populates="shop", lazy=True)
