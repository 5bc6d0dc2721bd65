from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.money import coerce_amount


class BudgetUpsert(BaseModel):
    user_id: uuid.UUID
    category: str = Field(min_length=1, max_length=64)
    budget_limit: float = Field(ge=0)
    emoji: str = Field(default="", max_length=16)

    @field_validator("category")
    @classmethod
    def strip_category(cls, v: str) -> str:
        return v.strip()


class Budget(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    category: str
    budget_limit: float
    emoji: str = ""
    created_at: Optional[datetime] = None


class BudgetSnapshot(BaseModel):
    """Read-only view of a budget as seen by the alert engine."""

    id: str
    category: str
    limit: Decimal = Decimal("0")
    emoji: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, v: Any) -> Decimal:
        # Malformed limits behave like an unset budget
        return coerce_amount(v)

    @field_validator("emoji", mode="before")
    @classmethod
    def default_emoji(cls, v: Any) -> str:
        return v or ""
