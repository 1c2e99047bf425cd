from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

USER_UPGRADED_EVENT = "user.upgraded"


class PolkaEventData(BaseModel):
    user_id: uuid.UUID


class PolkaEventIn(BaseModel):
    event: str = Field(min_length=1)
    data: PolkaEventData | None = None
