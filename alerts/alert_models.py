from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Dict, Set, Tuple

from pydantic import BaseModel, Field


class Band(IntEnum):
    """Severity ladder for spend vs. limit. Ordering matters: alerts only move up."""

    NONE = 0
    WARN = 1
    EXCEEDED = 2


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class TransientNotice(BaseModel):
    title: str
    description: str
    severity: Severity = Severity.INFO
    duration_ms: int = 5000
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class BudgetAlert:
    budget_id: str
    category: str
    emoji: str
    band: Band
    spent: Decimal
    limit: Decimal
    pct: Decimal
    warn_threshold: Decimal = Decimal("80")

    @property
    def over_amount(self) -> Decimal:
        return max(self.spent - self.limit, Decimal("0"))


@dataclass
class AlertState:
    """
    Session-scoped record of which (budget, band) alerts were already shown.

    Keys are bounded by number of budgets x 2 bands. Never persisted; a new
    engine (new session) starts with an empty state.
    """

    _keys: Set[Tuple[str, Band]] = field(default_factory=set)
    _highest: Dict[str, Band] = field(default_factory=dict)

    def highest(self, budget_id: str) -> Band:
        return self._highest.get(budget_id, Band.NONE)

    def should_alert(self, budget_id: str, band: Band) -> bool:
        return band > self.highest(budget_id)

    def mark(self, budget_id: str, band: Band) -> None:
        self._keys.add((budget_id, band))
        if band > self.highest(budget_id):
            self._highest[budget_id] = band

    def __contains__(self, key: Tuple[str, Band]) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
