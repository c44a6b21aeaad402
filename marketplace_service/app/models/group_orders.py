# app/models/group_orders.py
import uuid
from sqlalchemy import JSON, TIMESTAMP, Boolean, Column, ForeignKey, Numeric, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class GroupOrder(Base):
    __tablename__ = "group_orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    created_by = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False)
    total_cost = Column(Numeric(14, 2), nullable=False, default=0)
    is_confirmed = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    participants = relationship(
        "GroupOrderParticipant",
        back_populates="group_order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class GroupOrderParticipant(Base):
    __tablename__ = "group_order_participants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    group_order_id = Column(UUID(as_uuid=True), ForeignKey(
        "group_orders.id", ondelete="CASCADE"), nullable=False)
    vendor_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False)
    # free-form [{product_id, quantity}], not checked against the catalog
    items = Column(JSON, nullable=False, default=list)
    joined_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    group_order = relationship("GroupOrder", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("group_order_id", "vendor_id",
                         name="uq_group_order_participant"),
    )
