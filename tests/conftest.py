import os
import sys

# Ensure project root is on sys.path so `alerts`, `budgets` etc. resolve
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


# --- Test utilities: in-memory collaborators for the alert engine ---
import asyncio
from datetime import datetime, timezone

import pytest

from alerts.budget_alert_engine import BudgetAlertEngine
from alerts.notice_feed import NoticeFeed


USER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeBudgetSource:
    def __init__(self, budgets=None) -> None:
        self.budgets = list(budgets or [])
        self.calls = 0
        self.error: Exception | None = None

    async def list_for_user(self, user_id: str):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.budgets)


class FakeTransactionSource:
    def __init__(self, transactions=None) -> None:
        self.transactions = list(transactions or [])
        self.since_calls: list[datetime] = []
        self.error: Exception | None = None
        # When set, list_since waits on it (simulates a slow backend)
        self.gate: asyncio.Event | None = None

    async def list_since(self, user_id: str, since: datetime):
        self.since_calls.append(since)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.transactions)


class FakeNotificationSink:
    def __init__(self) -> None:
        self.rows: list[dict] = []
        self.error: Exception | None = None
        self.delay: float = 0.0

    async def create(self, user_id, type, title, message, category=None):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.rows.append(
            {"user_id": user_id, "type": type, "title": title, "message": message, "category": category}
        )


class RecordingNoticeSink:
    def __init__(self) -> None:
        self.notices: list = []
        self.error: Exception | None = None

    def publish(self, user_id, notice) -> None:
        if self.error is not None:
            raise self.error
        self.notices.append(notice)


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def budget_source():
    return FakeBudgetSource()


@pytest.fixture
def txn_source():
    return FakeTransactionSource()


@pytest.fixture
def notification_sink():
    return FakeNotificationSink()


@pytest.fixture
def notice_sink():
    return RecordingNoticeSink()


@pytest.fixture
def make_engine(budget_source, txn_source, notification_sink, notice_sink):
    def _make(**overrides) -> BudgetAlertEngine:
        params = dict(
            poll_interval=3600.0,
            motivational_delay=3600.0,
            warn_threshold=80.0,
            timezone_name="Asia/Kolkata",
            persist_timeout=1.0,
            budget_alerts_enabled=True,
            motivational_enabled=False,
            clock=lambda: FIXED_NOW,
        )
        params.update(overrides)
        return BudgetAlertEngine(
            USER_ID,
            budgets=budget_source,
            transactions=txn_source,
            notifications=notification_sink,
            notices=notice_sink,
            **params,
        )

    return _make


@pytest.fixture
def notice_feed():
    return NoticeFeed(maxlen=5)
