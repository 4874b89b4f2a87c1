from pydantic import BaseModel, ConfigDict
from datetime import datetime


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    title: str
    body: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
