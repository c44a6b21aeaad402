from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryStatus(str, Enum):
    ON_TIME = "on_time"
    DELAYED = "delayed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
