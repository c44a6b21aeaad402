# app/models/products.py
import uuid
from sqlalchemy import TIMESTAMP, Boolean, CheckConstraint, Column, Enum, Float, ForeignKey, Index, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ..enum.product_enum import AvailabilityStatus, ProductCategory, ProductUnit

LOW_STOCK_THRESHOLD = 10


class Product(Base):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Numeric(12, 2), nullable=False)
    unit = Column(
        Enum(
            ProductUnit,
            name="product_unit_enum",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ProductUnit.KG,
        nullable=False,
    )
    stock = Column(Integer, nullable=False, default=0)
    category = Column(
        Enum(
            ProductCategory,
            name="product_category_enum",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ProductCategory.VEGETABLES,
        nullable=False,
    )
    image_url = Column(String(500))
    min_order_quantity = Column(Integer, nullable=False, default=1)

    supplier_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False)
    # snapshot of the supplier's name at listing time
    supplier_name = Column(String(100), nullable=False)

    rating = Column(Float, nullable=False, default=0)
    rating_sum = Column(Integer, nullable=False, default=0)
    total_ratings = Column(Integer, nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    supplier = relationship("Users", lazy="joined")

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("min_order_quantity >= 1",
                        name="ck_products_min_order_quantity"),
        Index("ix_products_supplier_id", "supplier_id"),
        Index("ix_products_category", "category"),
        Index("ix_products_rating", "rating"),
        Index("ix_products_price", "price"),
        Index("ix_products_created_at", "created_at"),
    )

    @property
    def availability_status(self) -> AvailabilityStatus:
        if self.stock == 0:
            return AvailabilityStatus.OUT_OF_STOCK
        if self.stock < LOW_STOCK_THRESHOLD:
            return AvailabilityStatus.LOW_STOCK
        return AvailabilityStatus.IN_STOCK
