from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator
from models.enums import ASSIGNABLE_ROLES, Role

PAGE_SIZE_MAX = 50


class RoleUpdateRequest(BaseModel):
    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v):
        role = Role.parse(v)
        if role not in ASSIGNABLE_ROLES:
            raise ValueError("Invalid role specified")
        return role


class PageQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=PAGE_SIZE_MAX)


class UsersQuery(PageQuery):
    role: str = "all"
    search: str = ""

    @field_validator("role")
    @classmethod
    def _parse_role_filter(cls, v: str) -> str:
        if v.lower() == "all":
            return "all"
        return Role.parse(v).value


class VendorsQuery(PageQuery):
    status: Literal["all", "pending", "approved", "rejected"] = "all"
    search: str = ""


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image: Optional[str] = None
    isActive: bool = True


class CategoryPatchRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image: Optional[str] = None
    isActive: Optional[bool] = None
