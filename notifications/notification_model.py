from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
    BUDGET_WARNING = "budget_warning"
    BUDGET_ALERT = "budget_alert"
    MOTIVATIONAL = "motivational"


class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    category: Optional[str] = None
    is_read: bool = False
    created_at: datetime


class UnreadCount(BaseModel):
    unread: int
