import logging
import re
import uuid
from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, success_response
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from ..schemas import authschemas

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
MIN_PASSWORD_LENGTH = 6


def _clean(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_registration(req: authschemas.RegisterRequest) -> list:
    errors = []
    name = _clean(req.name)
    email = _clean(req.email)
    phone = _clean(req.phone)
    address = _clean(req.address)

    if not name:
        errors.append("Name is required")
    elif len(name) > 100:
        errors.append("Name cannot exceed 100 characters")

    if not email:
        errors.append("Email is required")
    elif not EMAIL_PATTERN.match(email.lower()):
        errors.append("Please enter a valid email")

    if not req.password:
        errors.append("Password is required")
    elif len(req.password) < MIN_PASSWORD_LENGTH:
        errors.append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if phone and len(phone) > 15:
        errors.append("Phone number cannot exceed 15 characters")
    if address and len(address) > 500:
        errors.append("Address cannot exceed 500 characters")
    return errors


def _auth_payload(user: Users) -> authschemas.AuthResponse:
    return authschemas.AuthResponse(
        token=auth.create_user_token(user),
        user=authschemas.UserOut.model_validate(user)
    )


def register(db: Session, req: authschemas.RegisterRequest):
    errors = validate_registration(req)
    if errors:
        return error_response(
            message=", ".join(errors),
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR),
            http_status=status.HTTP_400_BAD_REQUEST
        )

    email = req.email.strip().lower()
    existing = db.query(Users).filter(Users.email == email).first()
    if existing:
        return error_response(
            message="User with this email already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=status.HTTP_400_BAD_REQUEST
        )

    user = Users(
        name=req.name.strip(),
        email=email,
        role=req.role,
        phone=_clean(req.phone),
        address=_clean(req.address),
    )
    user.set_password(req.password)

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # a concurrent registration won the unique index
        db.rollback()
        return error_response(
            message="Email already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=status.HTTP_400_BAD_REQUEST
        )
    db.refresh(user)

    logger.info("Registered %s user %s", user.role.value, user.email)
    return success_response(
        data=_auth_payload(user),
        message="User registered successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


def login(db: Session, req: authschemas.LoginRequest):
    if not req.email or not req.password:
        return error_response(
            message="Email and password are required",
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR),
            http_status=status.HTTP_400_BAD_REQUEST
        )

    user = db.query(Users).filter(
        Users.email == req.email.strip().lower()).first()
    if not user:
        logger.warning("Login failed for unknown email %s", req.email)
        return error_response(
            message="Invalid email or password",
            status_code=str(AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.is_active:
        return error_response(
            message="Account is deactivated. Please contact support.",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INACTIVE),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.verify_password(req.password):
        logger.warning("Login failed for %s: bad password", user.email)
        return error_response(
            message="Invalid email or password",
            status_code=str(AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    logger.info("User %s logged in", user.email)
    return success_response(data=_auth_payload(user), message="Login successful")


def get_user(db: Session, current_user: UserToken) -> Users:
    user = db.query(Users).filter(
        Users.id == uuid.UUID(current_user.user_id)).first()
    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.NOT_FOUND),
            http_status=status.HTTP_404_NOT_FOUND
        )
    return user


def verify_token(db: Session, current_user: UserToken):
    user = get_user(db, current_user)
    return success_response(
        data=authschemas.VerifyTokenResponse(
            valid=True, user=authschemas.UserOut.model_validate(user)),
        message="Token is valid"
    )


def get_profile(db: Session, current_user: UserToken):
    user = get_user(db, current_user)
    return success_response(
        data=authschemas.ProfileResponse(
            user=authschemas.UserOut.model_validate(user))
    )


def update_profile(db: Session, current_user: UserToken, req: authschemas.ProfileUpdate):
    if not req.name:
        return error_response(
            message="Name is required",
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR),
            http_status=status.HTTP_400_BAD_REQUEST
        )

    errors = []
    if len(req.name) > 100:
        errors.append("Name cannot exceed 100 characters")
    if req.phone and len(req.phone) > 15:
        errors.append("Phone number cannot exceed 15 characters")
    if req.address and len(req.address) > 500:
        errors.append("Address cannot exceed 500 characters")
    if errors:
        return error_response(
            message=", ".join(errors),
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR),
            http_status=status.HTTP_400_BAD_REQUEST
        )

    user = get_user(db, current_user)
    user.name = req.name
    user.phone = req.phone
    user.address = req.address
    db.commit()
    db.refresh(user)

    logger.info("Updated profile of %s", user.email)
    return success_response(
        data=authschemas.ProfileResponse(
            user=authschemas.UserOut.model_validate(user)),
        message="Profile updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )
