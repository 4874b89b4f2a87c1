from sqlalchemy.orm import Session

from saknak.database.models import User
from saknak.schemas.auth_schema import UserCreate, ProfileUpdate
from saknak.utils.dependencies import hash_password


def create_user(payload: UserCreate, db: Session) -> User:
    user = User(
        name=payload.name,
        email=payload.email,
        user_type=payload.user_type.value,
        phone=payload.phone,
        hashed_password=hash_password(payload.password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user_by_email(email: str, db: Session):
    return db.query(User).filter_by(email=email).first()


def get_user_by_id(user_id: int, db: Session):
    return db.query(User).filter(User.id == user_id).first()


def update_profile(user: User, payload: ProfileUpdate, db: Session) -> User:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if isinstance(value, str):
            value = value.strip()
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    return user
