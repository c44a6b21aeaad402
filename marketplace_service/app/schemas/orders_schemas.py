from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel

from ..enum.order_enum import DeliveryStatus, OrderStatus
from shared.core.schemas import CommonQueryParams, Pagination
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class OrderItemRequest(EmptyStringModel):
    product_id: Optional[str] = None
    quantity: Optional[int] = None


class OrderCreate(EmptyStringModel):
    items: Optional[List[OrderItemRequest]] = None
    delivery_address: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class OrderStatusUpdate(EmptyStringModel):
    status: Optional[str] = None


class OrderRateRequest(EmptyStringModel):
    rating: Optional[int] = None
    review: Optional[str] = None


class OrderListRequest(CommonQueryParams):
    status: Optional[str] = None


class OrderItemOut(BaseModel):
    product_id: UUID
    product_name: str
    price: float
    quantity: int
    unit: str
    subtotal: float

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: UUID
    order_number: str
    vendor_id: UUID
    vendor_name: str
    vendor_email: str
    supplier_id: UUID
    supplier_name: str
    items: List[OrderItemOut] = []
    total_amount: float
    status: OrderStatus
    delivery_address: str
    phone: str
    notes: Optional[str] = None
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    rating: Optional[int] = None
    review: Optional[str] = None
    is_rated: bool = False
    order_age: int = 0
    delivery_status: DeliveryStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    order: OrderOut


class OrderListResponse(BaseModel):
    orders: List[OrderOut]
    pagination: Pagination


class NextStatusesResponse(BaseModel):
    current_status: OrderStatus
    next_statuses: List[OrderStatus]


class DashboardStats(BaseModel):
    total_orders: int = 0
    pending_orders: int = 0
    delivered_orders: int = 0
    cancelled_orders: int = 0
    total_spent: Optional[float] = None
    total_revenue: Optional[float] = None
    total_products: Optional[int] = None


class DashboardStatsResponse(BaseModel):
    stats: DashboardStats
