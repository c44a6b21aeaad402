from pydantic import BaseModel, Field
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    role: str
    name: Optional[str] = None
    email: Optional[str] = None
    exp: Optional[int] = None


class CommonQueryParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    current: int
    total: int
    has_next: bool
    has_prev: bool
    limit: int
    total_items: int


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


def build_pagination(page: int, limit: int, total_items: int) -> Pagination:
    total_pages = (total_items + limit - 1) // limit if limit else 0
    return Pagination(
        current=page,
        total=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
        limit=limit,
        total_items=total_items,
    )


def page_offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit
