from sqlalchemy import Column, String, Numeric, Text, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func
from models import db
from models.enums import OrderStatus
from models.user import _uuid


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_customer_status", "customer_id", "status"),
    )
    id = Column(String(36), primary_key=True, default=_uuid)
    order_number = Column(String(20), unique=True, nullable=False)
    customer_id = Column(String(36), ForeignKey("user.id"), nullable=False)
    status = Column(db.Enum(OrderStatus, native_enum=False, length=20), default=OrderStatus.PENDING, nullable=False)

    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    shipping_address = Column(Text, nullable=False)  # JSON document
    district = Column(String(100), nullable=True)
    shipping_method = Column(String(50), nullable=True)
    payment_method = Column(String(30), nullable=True)
    special_instructions = Column(Text, nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    customer = db.relationship("User", back_populates="orders")
    items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan", lazy=True)


class OrderItem(db.Model):
    __tablename__ = "order_item"
    id = db.Column(String(36), primary_key=True, default=_uuid)
    order_id = db.Column(String(36), db.ForeignKey("order.id"), nullable=False, index=True)
    product_id = db.Column(String(36), db.ForeignKey("product.id"), nullable=False)

    # Price snapshot at checkout
    price = db.Column(Numeric(12, 2), nullable=False)
    quantity = db.Column(Integer, nullable=False)

    product = db.relationship("Product")
