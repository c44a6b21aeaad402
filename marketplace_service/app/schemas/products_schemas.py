from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ..enum.product_enum import AvailabilityStatus, ProductCategory, ProductSortField, ProductUnit
from shared.core.schemas import CommonQueryParams, Pagination
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class ProductBase(EmptyStringModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    unit: Optional[ProductUnit] = None
    stock: Optional[int] = None
    category: Optional[ProductCategory] = None
    image_url: Optional[str] = None
    min_order_quantity: Optional[int] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    pass


class SupplierSummary(BaseModel):
    id: UUID
    name: str
    rating: float = 0
    total_ratings: int = 0

    class Config:
        from_attributes = True


class ProductOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    price: float
    unit: ProductUnit
    stock: int
    category: ProductCategory
    image_url: Optional[str] = None
    min_order_quantity: int
    supplier_id: UUID
    supplier_name: str
    supplier: Optional[SupplierSummary] = None
    rating: float = 0
    total_ratings: int = 0
    total_orders: int = 0
    availability_status: AvailabilityStatus
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductListRequest(CommonQueryParams):
    limit: int = Field(12, ge=1)
    category: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: ProductSortField = ProductSortField.CREATED_AT
    sort_order: Literal["asc", "desc"] = "desc"


class ProductListResponse(BaseModel):
    products: List[ProductOut]
    pagination: Pagination


class ProductResponse(BaseModel):
    product: ProductOut


class CategoryOut(BaseModel):
    value: ProductCategory
    label: str


class CategoryListResponse(BaseModel):
    categories: List[CategoryOut]


class RecommendationResponse(BaseModel):
    recommended: List[ProductOut]
