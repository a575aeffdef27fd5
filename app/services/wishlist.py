from sqlalchemy.exc import IntegrityError

from app.auth.permissions import Identity, Requirement, ensure
from app.exceptions import ConflictError, NotFound
from app.services.shaping import wishlist_item_dto
from models import db
from models.enums import Role
from models.product import Product
from models.wishlist import Wishlist


def _customer(identity: Identity) -> Identity:
    return ensure(identity, Requirement.of(Role.CUSTOMER, action="manage_wishlist"))


def list_items(identity: Identity) -> list:
    _customer(identity)
    entries = (
        Wishlist.query.filter_by(customer_id=identity.user_id)
        .order_by(Wishlist.created_at.desc())
        .all()
    )
    return [wishlist_item_dto(e) for e in entries]


def add_item(identity: Identity, product_id: str) -> dict:
    _customer(identity)
    if db.session.get(Product, product_id) is None:
        raise NotFound("Product not found")
    if Wishlist.query.filter_by(customer_id=identity.user_id, product_id=product_id).first():
        raise ConflictError("Product is already in your wishlist")

    entry = Wishlist(customer_id=identity.user_id, product_id=product_id)
    db.session.add(entry)
    try:
        db.session.flush()
    except IntegrityError:
        raise ConflictError("Product is already in your wishlist")
    return wishlist_item_dto(entry)


def remove_item(identity: Identity, entry_id: str) -> None:
    _customer(identity)
    entry = Wishlist.query.filter_by(id=entry_id, customer_id=identity.user_id).first()
    if entry is None:
        raise NotFound("Wishlist item not found")
    db.session.delete(entry)
