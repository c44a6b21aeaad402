# app/models/orders.py
import math
import secrets
import uuid
from datetime import datetime, timezone
from sqlalchemy import TIMESTAMP, Boolean, CheckConstraint, Column, Enum, ForeignKey, Index, Integer, Numeric, String, event, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ..enum.order_enum import DeliveryStatus, OrderStatus


def generate_order_number() -> str:
    """ORD-<UTC yyyymmddHHMMSS>-<6 hex chars>; the unique index is the real guard."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"ORD-{stamp}-{secrets.token_hex(3).upper()}"


def as_utc(value: datetime):
    # SQLite hands back naive datetimes
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Order(Base):
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_number = Column(String(32), unique=True, nullable=False)

    vendor_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False)
    vendor_name = Column(String(100), nullable=False)
    vendor_email = Column(String(200), nullable=False)
    supplier_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False)
    supplier_name = Column(String(100), nullable=False)

    total_amount = Column(Numeric(14, 2), nullable=False)
    status = Column(
        Enum(
            OrderStatus,
            name="order_status_enum",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=OrderStatus.PENDING,
        nullable=False,
    )

    delivery_address = Column(String(500), nullable=False)
    phone = Column(String(15), nullable=False)
    notes = Column(String(500))
    expected_delivery_date = Column(TIMESTAMP(timezone=True))
    actual_delivery_date = Column(TIMESTAMP(timezone=True))

    rating = Column(Integer)
    review = Column(String(500))
    is_rated = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True),
                        default=lambda: datetime.now(timezone.utc))
    updated_at = Column(TIMESTAMP(timezone=True),
                        default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0",
                        name="ck_orders_total_amount_non_negative"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)",
                        name="ck_orders_rating_range"),
        Index("ix_orders_vendor_created", "vendor_id", "created_at"),
        Index("ix_orders_supplier_created", "supplier_id", "created_at"),
        Index("ix_orders_status", "status"),
    )

    @property
    def order_age(self) -> int:
        """Whole days since the order was placed, rounded up."""
        if not self.created_at:
            return 0
        elapsed = abs(datetime.now(timezone.utc) - as_utc(self.created_at))
        return math.ceil(elapsed.total_seconds() / 86400)

    @property
    def delivery_status(self) -> DeliveryStatus:
        if self.status == OrderStatus.DELIVERED:
            return DeliveryStatus.DELIVERED
        if self.status == OrderStatus.CANCELLED:
            return DeliveryStatus.CANCELLED
        expected = as_utc(self.expected_delivery_date)
        if expected and datetime.now(timezone.utc) > expected:
            return DeliveryStatus.DELAYED
        return DeliveryStatus.ON_TIME


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey(
        "orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # snapshot of the product at order time, no live join afterwards
    product_id = Column(UUID(as_uuid=True), nullable=False)
    product_name = Column(String(200), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit = Column(String(16), nullable=False)
    subtotal = Column(Numeric(14, 2), nullable=False)

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
    )


# Auto-generate order number
@event.listens_for(Order, "before_insert")
def assign_order_number(mapper, connection, target):
    if not target.order_number:
        target.order_number = generate_order_number()
