from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from shared.utils.enums import UserRole
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = UserRole.VENDOR
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(EmptyStringModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class UserOut(BaseModel):
    id: UUID
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    rating: float = 0
    total_ratings: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class VerifyTokenResponse(BaseModel):
    valid: bool
    user: UserOut


class ProfileResponse(BaseModel):
    user: UserOut
