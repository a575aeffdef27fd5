from pydantic import BaseModel, Field
from typing import List, Optional


class OrderStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1)


class VendorOrdersQuery(BaseModel):
    status: Optional[str] = None
    search: Optional[str] = None


class ProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=2000)
    price: float = Field(ge=0)
    category: Optional[str] = None
    categoryId: str = Field(min_length=1)
    stock: int = Field(ge=0)
    images: List[str] = Field(default_factory=list, max_length=10)
    size: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=50)
    material: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    categoryId: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    images: Optional[List[str]] = Field(default=None, max_length=10)
    size: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=50)
    material: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)
