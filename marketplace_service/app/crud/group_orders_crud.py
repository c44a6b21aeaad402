import logging
from typing import List
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.id_helper import parse_uuid
from shared.utils.app_status_code import AppStatusCode
from shared.utils.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.group_orders import GroupOrder, GroupOrderParticipant
from ..schemas.group_orders_schemas import GroupOrderCreate, GroupOrderJoin

logger = logging.getLogger(__name__)


def create_group_order(db: Session, data: GroupOrderCreate, current_user: UserToken) -> GroupOrder:
    if not data.name:
        raise ValidationError("Group order name is required")

    group_order = GroupOrder(
        name=data.name,
        created_by=parse_uuid(current_user.user_id),
        participants=[],
    )
    db.add(group_order)
    db.commit()
    db.refresh(group_order)

    logger.info("Group order %s created by %s",
                group_order.id, current_user.user_id)
    return group_order


def join_group_order(db: Session, group_order_id: str, data: GroupOrderJoin, current_user: UserToken) -> GroupOrder:
    gid = parse_uuid(group_order_id)
    group_order = db.query(GroupOrder).filter(
        GroupOrder.id == gid).first() if gid else None
    if not group_order:
        raise NotFoundError("Group order not found")

    vendor_id = parse_uuid(current_user.user_id)
    if any(p.vendor_id == vendor_id for p in group_order.participants):
        raise ConflictError("You have already joined",
                            status_code=AppStatusCode.DUPLICATE_ADD_ERROR)

    group_order.participants.append(
        GroupOrderParticipant(vendor_id=vendor_id, items=data.items))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already joined",
                            status_code=AppStatusCode.DUPLICATE_ADD_ERROR)

    db.refresh(group_order)
    logger.info("Vendor %s joined group order %s", vendor_id, group_order.id)
    return group_order


def get_group_orders(db: Session) -> List[GroupOrder]:
    return db.query(GroupOrder).order_by(desc(GroupOrder.created_at), GroupOrder.id).all()
