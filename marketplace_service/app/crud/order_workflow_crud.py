import logging
from datetime import datetime, timedelta, timezone
from typing import List
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.utils.app_status_code import AppStatusCode
from shared.utils.exceptions import (AuthorizationError, ConcurrentUpdateError, ConflictError,
                                     InternalError, MarketplaceError, ValidationError)
from ..enum.order_enum import OrderStatus
from ..models.orders import Order
from ..schemas.orders_schemas import OrderRateRequest, OrderStatusUpdate
from . import ratings_crud
from .orders_crud import get_order, get_order_by_id, parse_status

logger = logging.getLogger(__name__)

EXPECTED_DELIVERY_DAYS = 2
MAX_REVIEW_LENGTH = 500

# delivered and cancelled have no outgoing edges
STATUS_TRANSITIONS = {
    OrderStatus.PENDING: [OrderStatus.CONFIRMED, OrderStatus.CANCELLED],
    OrderStatus.CONFIRMED: [OrderStatus.DISPATCHED, OrderStatus.CANCELLED],
    OrderStatus.DISPATCHED: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],
    OrderStatus.CANCELLED: [],
}


def get_possible_next_statuses(order: Order) -> List[OrderStatus]:
    return list(STATUS_TRANSITIONS.get(order.status, []))


def check_transition(current: OrderStatus, target: OrderStatus):
    if not STATUS_TRANSITIONS.get(current):
        raise ConflictError("Order status cannot be changed")

    if target not in STATUS_TRANSITIONS[current]:
        raise ConflictError(
            f"Cannot change status from {current.value} to {target.value}")


def transition_values(target: OrderStatus, now: datetime) -> dict:
    values = {"status": target, "updated_at": now}
    if target == OrderStatus.CONFIRMED:
        values["expected_delivery_date"] = now + \
            timedelta(days=EXPECTED_DELIVERY_DAYS)
    elif target == OrderStatus.DELIVERED:
        values["actual_delivery_date"] = now
    return values


def update_order_status(db: Session, order_id: str, data: OrderStatusUpdate, current_user: UserToken) -> Order:
    if not data.status:
        raise ValidationError("Status is required")

    target = parse_status(data.status)

    try:
        order = get_order_by_id(db, order_id, lock=True)

        if str(order.supplier_id) != current_user.user_id:
            logger.warning("User %s tried to change status of order %s",
                           current_user.user_id, order.order_number)
            raise AuthorizationError("Not authorized to update this order")

        current = order.status
        check_transition(current, target)

        # compare-and-set on the status we validated against
        result = db.execute(
            update(Order)
            .where(Order.id == order.id, Order.status == current)
            .values(**transition_values(target, datetime.now(timezone.utc)))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrentUpdateError(
                "Order status was changed by another request, please retry")

        db.commit()
    except MarketplaceError as e:
        db.rollback()
        logger.warning("Status change on order %s rejected: %s",
                       order_id, e.message)
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Status update failed for order %s", order_id)
        raise InternalError("Server error during order status update")

    db.refresh(order)
    logger.info("Order %s moved from %s to %s",
                order.order_number, current.value, target.value)
    return order


def rate_order(db: Session, order_id: str, data: OrderRateRequest, current_user: UserToken) -> Order:
    rating = ratings_crud.validate_rating(data.rating)
    if data.review and len(data.review) > MAX_REVIEW_LENGTH:
        raise ValidationError("Review cannot exceed 500 characters")

    try:
        order = get_order_by_id(db, order_id, lock=True)

        if str(order.vendor_id) != current_user.user_id:
            raise AuthorizationError("Not authorized to rate this order")

        if order.status != OrderStatus.DELIVERED:
            raise ConflictError("Order must be delivered before rating",
                                status_code=AppStatusCode.ORDER_NOT_DELIVERED)

        if order.is_rated:
            raise ConflictError("Order has already been rated",
                                status_code=AppStatusCode.ORDER_ALREADY_RATED)

        # is_rated only ever flips once
        result = db.execute(
            update(Order)
            .where(
                Order.id == order.id,
                Order.is_rated == False,
                Order.status == OrderStatus.DELIVERED,
            )
            .values(rating=rating, review=data.review, is_rated=True,
                    updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError("Order has already been rated",
                                status_code=AppStatusCode.ORDER_ALREADY_RATED)

        ratings_crud.apply_user_rating(db, order.supplier_id, rating)
        db.commit()
    except MarketplaceError as e:
        db.rollback()
        logger.warning("Rating of order %s rejected: %s", order_id, e.message)
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Rating failed for order %s", order_id)
        raise InternalError("Server error during order rating")

    db.refresh(order)
    logger.info("Order %s rated %s by vendor %s",
                order.order_number, rating, current_user.user_id)
    return order


def get_next_statuses(db: Session, order_id: str, current_user: UserToken):
    order = get_order(db, order_id, current_user)
    return order, get_possible_next_statuses(order)
