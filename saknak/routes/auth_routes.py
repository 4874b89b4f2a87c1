import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.schemas.auth_schema import LoginRequest, UserCreate, UserResponse
from saknak.services.auth_service import create_user, get_user_by_email
from saknak.utils.dependencies import (
    create_access_token,
    get_current_user,
    verify_password,
)
from saknak.responses.success import data_response
from saknak.responses.error import (
    conflict_error,
    forbidden_error,
    internal_server_error,
    unauthorized_error,
)

logger = logging.getLogger("saknak.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup")
def signup(payload: UserCreate, db: Session = Depends(get_db)):
    existing = get_user_by_email(payload.email, db)
    if existing:
        return conflict_error("User already exists")

    try:
        user = create_user(payload, db)
        token = create_access_token({"sub": user.email})
        logger.info("User %s signed up as %s", user.id, user.user_type)
        return data_response(
            {
                "access_token": token,
                "token_type": "bearer",
                "user": UserResponse.model_validate(user),
            }
        )
    except Exception as e:
        logger.exception("Failed to register user")
        return internal_server_error(f"Failed to register user: {str(e)}")


@router.post("/signin")
def signin(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = get_user_by_email(credentials.email, db)
        if not user or not verify_password(credentials.password, user.hashed_password):
            return unauthorized_error("Invalid credentials")
        if not user.is_active:
            return forbidden_error("Account is disabled")

        token = create_access_token({"sub": user.email})
        return data_response(
            {
                "access_token": token,
                "token_type": "bearer",
                "user": UserResponse.model_validate(user),
            }
        )
    except Exception as e:
        logger.exception("Sign in failed")
        return internal_server_error(str(e))


@router.get("/me")
def get_me(current_user=Depends(get_current_user)):
    return data_response(UserResponse.model_validate(current_user))
