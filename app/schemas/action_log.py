# app/schemas/action_log.py
from datetime import datetime
from typing import Optional
from app.schemas.common import ApiModel


class ActionLogOut(ApiModel):
    id: int
    user_id: int
    action: str
    details: Optional[str]
    created_at: datetime
