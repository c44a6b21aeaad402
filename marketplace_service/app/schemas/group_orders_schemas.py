from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID
from pydantic import BaseModel

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class GroupOrderCreate(EmptyStringModel):
    name: Optional[str] = None


class GroupOrderJoin(BaseModel):
    items: List[Any] = []


class GroupOrderParticipantOut(BaseModel):
    vendor_id: UUID
    items: List[Any] = []
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupOrderOut(BaseModel):
    id: UUID
    name: str
    created_by: UUID
    participants: List[GroupOrderParticipantOut] = []
    total_cost: float = 0
    is_confirmed: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupOrderResponse(BaseModel):
    group_order: GroupOrderOut


class GroupOrderListResponse(BaseModel):
    orders: List[GroupOrderOut]
