from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_vendor
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import group_orders_crud as crud
from ..schemas.group_orders_schemas import (GroupOrderCreate, GroupOrderJoin, GroupOrderListResponse,
                                            GroupOrderOut, GroupOrderResponse)

router = APIRouter(prefix="/api/group-orders",
                   tags=["group orders"], dependencies=[Depends(allow_vendor)])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JsonOutResult[GroupOrderResponse])
def create_group_order(
    data: GroupOrderCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_vendor)
):
    group_order = crud.create_group_order(db, data, current_user)
    return success_response(
        data=GroupOrderResponse(
            group_order=GroupOrderOut.model_validate(group_order)),
        message="Group order created",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.post("/{group_order_id}/join", response_model=JsonOutResult[GroupOrderResponse])
def join_group_order(
    group_order_id: str,
    data: GroupOrderJoin,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_vendor)
):
    group_order = crud.join_group_order(db, group_order_id, data, current_user)
    return success_response(
        data=GroupOrderResponse(
            group_order=GroupOrderOut.model_validate(group_order)),
        message="Joined successfully"
    )


@router.get("", response_model=JsonOutResult[GroupOrderListResponse])
def get_group_orders(db: Session = Depends(get_db)):
    return success_response(
        data=GroupOrderListResponse(
            orders=[GroupOrderOut.model_validate(g) for g in crud.get_group_orders(db)]))
