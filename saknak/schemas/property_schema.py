from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from saknak.enums.property_type import RentalType, PropertyStatus, GenderPreference


class PropertyBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    address: Optional[str] = None
    rental_type: RentalType = RentalType.APARTMENT
    price: float = Field(gt=0)
    furnished: bool = False
    has_internet: bool = False
    gender_preference: GenderPreference = GenderPreference.ANY
    num_rooms: Optional[int] = None
    num_beds: Optional[int] = None


class PropertyCreate(PropertyBase):
    model_config = ConfigDict(extra="forbid")


class PropertyUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    rental_type: Optional[RentalType] = None
    price: Optional[float] = Field(default=None, gt=0)
    status: Optional[PropertyStatus] = None
    furnished: Optional[bool] = None
    has_internet: Optional[bool] = None
    gender_preference: Optional[GenderPreference] = None
    num_rooms: Optional[int] = None
    num_beds: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class PropertyFilter(BaseModel):
    search: Optional[str] = None
    rental_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    furnished: Optional[bool] = None


class PropertyResponse(BaseModel):
    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    address: Optional[str] = None
    rental_type: str
    price: float
    status: str
    furnished: bool
    has_internet: bool
    gender_preference: Optional[str] = None
    num_rooms: Optional[int] = None
    num_beds: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
