from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class RatingCreate(BaseModel):
    booking_id: int
    stars: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(extra="forbid")


class RatingResponse(BaseModel):
    id: int
    booking_id: int
    from_user: int
    to_user: int
    stars: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
