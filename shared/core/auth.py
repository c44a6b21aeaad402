from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid
from fastapi import status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_db

security = HTTPBearer()


def create_access_token(data: dict) -> str:
    payload = data.copy()
    expires = datetime.now(timezone.utc) + \
        timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload['exp'] = expires

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def create_user_token(user: Users) -> str:
    return create_access_token({
        "user_id": str(user.id),
        "role": user.role.value,
        "name": user.name,
        "email": user.email,
    })


def verify_token(token: str) -> Optional[UserToken]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValueError):
        return error_response(
            message="Invalid or expired token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED),
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def get_user_for_token(db: Session, user_data: UserToken) -> Optional[Users]:
    try:
        user_id = uuid.UUID(user_data.user_id)
    except ValueError:
        return None
    return db.query(Users).filter(Users.id == user_id).first()


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
):
    token = credentials.credentials
    user_data = verify_token(token)

    # Fetch the user from the database
    user = get_user_for_token(db, user_data)

    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.is_active:
        return error_response(
            message="Account is deactivated. Please contact support.",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INACTIVE),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    # name/email may have changed since the token was issued
    user_data.role = user.role.value
    user_data.name = user.name
    user_data.email = user.email
    return user_data


def allow_vendor(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role != UserRole.VENDOR.value:
        return error_response(
            message="Access forbidden: vendors only",
            status_code=str(AppStatusCode.UNAUTHORIZED_ACTION),
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user


def allow_supplier(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role != UserRole.SUPPLIER.value:
        return error_response(
            message="Access forbidden: suppliers only",
            status_code=str(AppStatusCode.UNAUTHORIZED_ACTION),
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user
