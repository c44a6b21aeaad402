from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_supplier, allow_vendor, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import order_workflow_crud, orders_crud as crud
from ..schemas.orders_schemas import (DashboardStatsResponse, NextStatusesResponse, OrderCreate, OrderListRequest,
                                      OrderListResponse, OrderOut, OrderRateRequest, OrderResponse, OrderStatusUpdate)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _order_response(order) -> OrderResponse:
    return OrderResponse(order=OrderOut.model_validate(order))


# declared before /{order_id} so "statistics" is not read as an id
@router.get("/statistics/dashboard", response_model=JsonOutResult[DashboardStatsResponse])
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(
        data=DashboardStatsResponse(stats=crud.get_dashboard_stats(db, current_user)))


@router.get("", response_model=JsonOutResult[OrderListResponse])
def get_orders(
    params: OrderListRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    orders, pagination = crud.get_orders(db, current_user, params)
    return success_response(
        data=OrderListResponse(
            orders=[OrderOut.model_validate(o) for o in orders],
            pagination=pagination))


@router.get("/{order_id}", response_model=JsonOutResult[OrderResponse])
def get_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(
        data=_order_response(crud.get_order(db, order_id, current_user)))


@router.get("/{order_id}/next-statuses", response_model=JsonOutResult[NextStatusesResponse])
def get_next_statuses(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    order, next_statuses = order_workflow_crud.get_next_statuses(
        db, order_id, current_user)
    return success_response(
        data=NextStatusesResponse(
            current_status=order.status, next_statuses=next_statuses))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JsonOutResult[OrderResponse])
def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_vendor)
):
    created = crud.create_order(db, order, current_user)
    return success_response(
        data=_order_response(created),
        message="Order placed successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{order_id}/status", response_model=JsonOutResult[OrderResponse])
def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_supplier)
):
    updated = order_workflow_crud.update_order_status(
        db, order_id, data, current_user)
    return success_response(
        data=_order_response(updated),
        message="Order status updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{order_id}/rate", response_model=JsonOutResult[OrderResponse])
def rate_order(
    order_id: str,
    data: OrderRateRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_vendor)
):
    rated = order_workflow_crud.rate_order(db, order_id, data, current_user)
    return success_response(
        data=_order_response(rated),
        message="Rating submitted successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )
