import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ChirpCreate(BaseModel):
    body: str


class ChirpOut(BaseModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    body: str
    user_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)
