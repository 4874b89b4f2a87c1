from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional

from saknak.enums.user_type import UserType


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    user_type: UserType = UserType.STUDENT
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    civil_id_url: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    college: Optional[str] = None
    level: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    user_type: str
    phone: Optional[str] = None
    civil_id_url: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    college: Optional[str] = None
    level: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserMinimumResponse(BaseModel):
    id: int
    name: str
    user_type: str

    model_config = ConfigDict(from_attributes=True)
