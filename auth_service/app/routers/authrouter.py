from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from shared.core import auth
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from ..schemas import authschemas
from ..services import authservices

router = APIRouter(prefix="/api/auth", tags=["Marketplace Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED,
             response_model=JsonOutResult[authschemas.AuthResponse])
def register(
        req: authschemas.RegisterRequest,
        db: Session = Depends(get_db)):
    return authservices.register(db, req)


@router.post("/login", response_model=JsonOutResult[authschemas.AuthResponse])
def login(
        req: authschemas.LoginRequest,
        db: Session = Depends(get_db)):
    return authservices.login(db, req)


@router.post("/verify-token", response_model=JsonOutResult[authschemas.VerifyTokenResponse])
def verify_token(
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.verify_token(db, current_user)


@router.get("/profile", response_model=JsonOutResult[authschemas.ProfileResponse])
def get_profile(
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.get_profile(db, current_user)


@router.put("/profile", response_model=JsonOutResult[authschemas.ProfileResponse])
def update_profile(
        req: authschemas.ProfileUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.update_profile(db, current_user, req)
