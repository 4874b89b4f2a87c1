import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional

from saknak import config
from saknak.config import ALGORITHM, SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from saknak.database.init import get_db
from saknak.database.models.user_model import User
from saknak.enums.user_type import UserType
from saknak.responses.job import CORS_HEADERS

logger = logging.getLogger("saknak.auth")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin")
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
_jobs_bearer = HTTPBearer(auto_error=False)


def hash_password(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the bearer token. Every service call receives this user explicitly."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email = payload.get("sub")
        if email is None:
            raise HTTPException(status_code=401, detail="Invalid credentials")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid provided token")

    user = db.query(User).filter_by(email=email).first()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    return user


def owner_required(current_user: User = Depends(get_current_user)):
    """Dependency to ensure the current user is a property owner"""
    if current_user.user_type != UserType.OWNER.value:
        raise HTTPException(status_code=403, detail="Only property owners can access this endpoint")
    return current_user


def student_required(current_user: User = Depends(get_current_user)):
    """Dependency to ensure the current user is a student"""
    if current_user.user_type != UserType.STUDENT.value:
        raise HTTPException(status_code=403, detail="Only students can access this endpoint")
    return current_user


async def require_jobs_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_jobs_bearer),
) -> None:
    """Protect the /functions endpoints when JOBS_API_KEY is configured."""
    key = config.JOBS_API_KEY
    if not key:
        return

    if credentials is None or credentials.credentials != key:
        logger.warning("Rejected job invocation with a missing or invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing job token.",
            headers={"WWW-Authenticate": "Bearer", **CORS_HEADERS},
        )
