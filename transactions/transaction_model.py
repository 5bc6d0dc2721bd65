from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.money import coerce_amount


class TransactionCreate(BaseModel):
    user_id: uuid.UUID
    category: str = Field(min_length=1, max_length=64)
    # Negative for debits
    amount: float
    note: Optional[str] = None


class Transaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    category: str
    amount: float
    note: Optional[str] = None
    created_at: datetime


class TransactionSnapshot(BaseModel):
    category: str
    amount: Decimal = Decimal("0")
    created_at: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce(cls, v: Any) -> Decimal:
        return coerce_amount(v)
