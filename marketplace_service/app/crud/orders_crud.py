import logging
from decimal import Decimal
from typing import List
from sqlalchemy import case, desc, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken, build_pagination, page_offset
from shared.helpers.id_helper import parse_uuid
from shared.utils.enums import UserRole
from shared.utils.exceptions import (AuthorizationError, InsufficientStockError, InternalError,
                                     MarketplaceError, NotFoundError, ValidationError)
from ..enum.order_enum import OrderStatus
from ..models.orders import Order, OrderItem
from ..models.products import Product
from ..schemas.orders_schemas import DashboardStats, OrderCreate, OrderListRequest

logger = logging.getLogger(__name__)

MAX_ADDRESS_LENGTH = 500
MAX_PHONE_LENGTH = 15
MAX_NOTES_LENGTH = 500


def validate_order_request(data: OrderCreate):
    if not data.items:
        raise ValidationError("Order items are required")

    if not data.delivery_address or not data.phone:
        raise ValidationError("Delivery address and phone are required")

    errors = []
    if len(data.delivery_address) > MAX_ADDRESS_LENGTH:
        errors.append("Delivery address cannot exceed 500 characters")
    if len(data.phone) > MAX_PHONE_LENGTH:
        errors.append("Phone number cannot exceed 15 characters")
    if data.notes and len(data.notes) > MAX_NOTES_LENGTH:
        errors.append("Notes cannot exceed 500 characters")
    if errors:
        raise ValidationError(", ".join(errors))


def load_order_products(db: Session, data: OrderCreate) -> dict:
    """Lock and return the requested active products keyed by id."""
    requested_ids = [parse_uuid(item.product_id) for item in data.items]
    if any(pid is None for pid in requested_ids):
        raise ValidationError("Some products not found or inactive")

    distinct_ids = set(requested_ids)
    products = (
        db.query(Product)
        .filter(Product.id.in_(distinct_ids), Product.is_active == True)
        .with_for_update(of=Product)
        .all()
    )
    if len(products) != len(distinct_ids):
        raise ValidationError("Some products not found or inactive")

    return {p.id: p for p in products}


def check_order_lines(data: OrderCreate, products: dict) -> List[dict]:
    lines = [(products[parse_uuid(item.product_id)], item.quantity or 0)
             for item in data.items]

    supplier_ids = {product.supplier_id for product, _ in lines}
    if len(supplier_ids) > 1:
        raise ValidationError("All items must be from the same supplier")

    # minimum quantity fails on the first offending line
    for product, quantity in lines:
        if quantity < product.min_order_quantity:
            raise ValidationError(
                f"Minimum order quantity for {product.name} is {product.min_order_quantity}")

    # stock shortfalls are reported together
    shortfalls = [
        {
            "product_id": str(product.id),
            "product_name": product.name,
            "requested": quantity,
            "available": product.stock,
        }
        for product, quantity in lines
        if quantity > product.stock
    ]
    if shortfalls:
        raise InsufficientStockError(shortfalls)

    return [
        {
            "product": product,
            "quantity": quantity,
            "price": Decimal(product.price),
            "subtotal": Decimal(product.price) * quantity,
        }
        for product, quantity in lines
    ]


def reserve_stock(db: Session, product_id, quantity: int):
    """Compare-and-decrement: only succeeds while stock still covers quantity."""
    remaining = Product.stock - quantity
    result = db.execute(
        update(Product)
        .where(
            Product.id == product_id,
            Product.is_active == True,
            Product.stock >= quantity,
        )
        .values(
            stock=case((remaining < 0, 0), else_=remaining),
            total_orders=Product.total_orders + 1,
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        name, available = db.query(Product.name, Product.stock).filter(
            Product.id == product_id).one()
        raise InsufficientStockError([{
            "product_id": str(product_id),
            "product_name": name,
            "requested": quantity,
            "available": available,
        }])


def create_order(db: Session, data: OrderCreate, current_user: UserToken) -> Order:
    validate_order_request(data)

    try:
        products = load_order_products(db, data)
        lines = check_order_lines(data, products)
        supplier = lines[0]["product"].supplier

        order = Order(
            vendor_id=parse_uuid(current_user.user_id),
            vendor_name=current_user.name,
            vendor_email=current_user.email,
            supplier_id=supplier.id,
            supplier_name=supplier.name,
            status=OrderStatus.PENDING,
            delivery_address=data.delivery_address,
            phone=data.phone,
            notes=data.notes,
            total_amount=sum((line["subtotal"] for line in lines), Decimal("0")),
            items=[
                OrderItem(
                    position=index,
                    product_id=line["product"].id,
                    product_name=line["product"].name,
                    price=line["price"],
                    quantity=line["quantity"],
                    unit=line["product"].unit.value,
                    subtotal=line["subtotal"],
                )
                for index, line in enumerate(lines)
            ],
        )
        db.add(order)
        db.flush()

        # one reservation per product, so repeated lines count as one order
        reserved = {}
        for line in lines:
            product_id = line["product"].id
            reserved[product_id] = reserved.get(product_id, 0) + line["quantity"]
        for product_id, quantity in reserved.items():
            reserve_stock(db, product_id, quantity)

        db.commit()
    except MarketplaceError as e:
        db.rollback()
        logger.warning("Order rejected for vendor %s: %s",
                       current_user.user_id, e.message)
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Order creation failed for vendor %s",
                         current_user.user_id)
        raise InternalError("Server error during order creation")

    db.refresh(order)
    logger.info("Order %s placed by vendor %s with supplier %s, total %s",
                order.order_number, order.vendor_id, order.supplier_id, order.total_amount)
    return order


def _party_filter(current_user: UserToken):
    user_id = parse_uuid(current_user.user_id)
    if current_user.role == UserRole.SUPPLIER.value:
        return Order.supplier_id == user_id
    return Order.vendor_id == user_id


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value.lower())
    except ValueError:
        raise ValidationError("Invalid status") from None


def get_orders(db: Session, current_user: UserToken, params: OrderListRequest):
    filters = [_party_filter(current_user)]

    if params.status and params.status.lower() != "all":
        filters.append(Order.status == parse_status(params.status))

    total = db.query(func.count(Order.id)).filter(*filters).scalar()
    orders = (
        db.query(Order)
        .filter(*filters)
        .order_by(desc(Order.created_at), Order.id)
        .offset(page_offset(params.page, params.limit))
        .limit(params.limit)
        .all()
    )

    return orders, build_pagination(params.page, params.limit, total)


def get_order_by_id(db: Session, order_id: str, lock: bool = False) -> Order:
    oid = parse_uuid(order_id)
    if not oid:
        raise NotFoundError("Order not found")

    query = db.query(Order).filter(Order.id == oid)
    if lock:
        query = query.with_for_update()

    order = query.first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def get_order(db: Session, order_id: str, current_user: UserToken) -> Order:
    order = get_order_by_id(db, order_id)

    if current_user.user_id not in (str(order.vendor_id), str(order.supplier_id)):
        logger.warning("User %s tried to view order %s",
                       current_user.user_id, order.id)
        raise AuthorizationError("Not authorized to view this order")
    return order


def get_dashboard_stats(db: Session, current_user: UserToken) -> DashboardStats:
    party = _party_filter(current_user)

    counts = dict(
        db.query(Order.status, func.count(Order.id))
        .filter(party)
        .group_by(Order.status)
        .all()
    )
    delivered_amount = (
        db.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(party, Order.status == OrderStatus.DELIVERED)
        .scalar()
    )

    stats = DashboardStats(
        total_orders=sum(counts.values()),
        pending_orders=counts.get(OrderStatus.PENDING, 0) +
        counts.get(OrderStatus.CONFIRMED, 0),
        delivered_orders=counts.get(OrderStatus.DELIVERED, 0),
        cancelled_orders=counts.get(OrderStatus.CANCELLED, 0),
    )

    if current_user.role == UserRole.SUPPLIER.value:
        stats.total_revenue = float(delivered_amount)
        stats.total_products = (
            db.query(func.count(Product.id))
            .filter(Product.supplier_id == parse_uuid(current_user.user_id),
                    Product.is_active == True)
            .scalar()
        )
    else:
        stats.total_spent = float(delivered_amount)

    return stats
