from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from app.schemas.admin import PAGE_SIZE_MAX


class CartAddRequest(BaseModel):
    productId: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(BaseModel):
    quantity: int = Field(ge=1)


class WishlistAddRequest(BaseModel):
    productId: str = Field(min_length=1)


class ShippingAddress(BaseModel):
    fullName: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    district: str = Field(min_length=1)

    model_config = {"extra": "allow"}


class CheckoutItem(BaseModel):
    productId: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    name: Optional[str] = None


class CheckoutRequest(BaseModel):
    items: List[CheckoutItem] = Field(min_length=1)
    shippingAddress: ShippingAddress
    shippingMethod: str = "standard"
    paymentMethod: Literal["cod", "card", "mobile_money"] = "cod"
    shippingCost: float = Field(default=0, ge=0)
    specialInstructions: Optional[str] = None


class CustomerOrdersQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=PAGE_SIZE_MAX)
    status: Optional[str] = None


class ShopProductsQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1, le=PAGE_SIZE_MAX)
    search: str = ""
    category: str = ""
    vendor: str = ""
    sort: Literal["featured", "price-low", "price-high", "newest", "rating"] = "featured"


class FilterOptionsQuery(BaseModel):
    category: str = ""


class VendorDirectoryQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1, le=PAGE_SIZE_MAX)
    search: str = ""
    district: str = ""
    category: str = ""
