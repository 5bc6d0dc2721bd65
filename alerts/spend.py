from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable
from zoneinfo import ZoneInfo

import pandas as pd

from schemas.money import ZERO
from transactions.transaction_model import TransactionSnapshot


def month_start(now: datetime, tz_name: str) -> datetime:
    """First instant of the calendar month containing `now`, in `tz_name`."""
    local = now.astimezone(ZoneInfo(tz_name))
    return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _build_dataframe(transactions: Iterable[TransactionSnapshot]) -> pd.DataFrame:
    rows = [t.model_dump() for t in transactions]
    if not rows:
        return pd.DataFrame(columns=["category", "amount", "created_at"])
    # amounts stay Decimal (object dtype); float sums drift off exact limits
    return pd.DataFrame(rows)


def _decimal_sum(values: pd.Series) -> Decimal:
    return sum(values, ZERO)


def spend_by_category(transactions: Iterable[TransactionSnapshot]) -> Dict[str, Decimal]:
    """Sum of absolute amounts per category. Recomputed on every call."""
    df = _build_dataframe(transactions)
    if df.empty:
        return {}
    df = df[df["category"].notna()].copy()
    df["spend"] = df["amount"].map(abs)
    by_cat = df.groupby("category", dropna=True)["spend"].agg(_decimal_sum)
    return {str(category): total for category, total in by_cat.items()}
