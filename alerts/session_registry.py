from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from alerts.budget_alert_engine import BudgetAlertEngine
from alerts.notice_feed import NoticeFeed
from alerts.pg_sources import PgBudgetSource, PgNotificationSink, PgTransactionSource
from db.postgres import get_session_factory
from settings.config import settings

logger = logging.getLogger(__name__)

EngineFactory = Callable[[str], BudgetAlertEngine]


class AlertSessionRegistry:
    """One alert engine per signed-in user; the engine's lifetime is the session."""

    def __init__(self, engine_factory: EngineFactory, notice_feed: Optional[NoticeFeed] = None) -> None:
        self._engine_factory = engine_factory
        self._notice_feed = notice_feed
        self._engines: Dict[str, BudgetAlertEngine] = {}

    @property
    def active_users(self) -> List[str]:
        return list(self._engines)

    def get(self, user_id: str) -> Optional[BudgetAlertEngine]:
        return self._engines.get(user_id)

    def start_session(self, user_id: str) -> BudgetAlertEngine:
        engine = self._engines.get(user_id)
        if engine is not None:
            return engine
        engine = self._engine_factory(user_id)
        self._engines[user_id] = engine
        engine.start()
        return engine

    async def end_session(self, user_id: str) -> bool:
        engine = self._engines.pop(user_id, None)
        if engine is None:
            return False
        await engine.stop()
        if self._notice_feed is not None:
            self._notice_feed.discard(user_id)
        return True

    async def shutdown(self) -> None:
        users = list(self._engines)
        for user_id in users:
            await self.end_session(user_id)
        if users:
            logger.info("Closed %d budget alert sessions", len(users))


notice_feed = NoticeFeed(maxlen=settings.NOTICE_FEED_MAXLEN)
_registry: AlertSessionRegistry | None = None


def _pg_engine_factory(user_id: str) -> BudgetAlertEngine:
    session_factory = get_session_factory()
    return BudgetAlertEngine(
        user_id,
        budgets=PgBudgetSource(session_factory),
        transactions=PgTransactionSource(session_factory),
        notifications=PgNotificationSink(session_factory),
        notices=notice_feed,
    )


def get_session_registry() -> AlertSessionRegistry:
    global _registry
    if _registry is None:
        _registry = AlertSessionRegistry(_pg_engine_factory, notice_feed)
    return _registry


def get_notice_feed() -> NoticeFeed:
    return notice_feed
