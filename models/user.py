import uuid
from datetime import datetime
from models import db
from models.enums import Role


def _uuid():
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = "user"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(30), nullable=True)
    role = db.Column(db.Enum(Role, native_enum=False, length=20), nullable=False, default=Role.CUSTOMER)
    district = db.Column(db.String(100), nullable=True, index=True)

    # Password reset
    reset_token = db.Column(db.String(64), nullable=True, unique=True)
    reset_token_expiry = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor_shop = db.relationship(
        "VendorShop",
        back_populates="vendor",
        uselist=False,
        cascade="all, delete-orphan",
        foreign_keys="VendorShop.vendor_id",
    )
    orders = db.relationship("Order", back_populates="customer", lazy=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"
