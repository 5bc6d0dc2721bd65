from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Protocol, Sequence

from alerts.alert_models import AlertState, Band, BudgetAlert, Severity, TransientNotice
from alerts.messages import notice_for, notification_for, pick_motivational
from alerts.spend import month_start, spend_by_category
from budgets.budget_model import BudgetSnapshot
from notifications.notification_model import NotificationType
from schemas.money import ZERO
from settings.config import settings
from transactions.transaction_model import TransactionSnapshot

logger = logging.getLogger(__name__)


class BudgetSource(Protocol):
    async def list_for_user(self, user_id: str) -> List[BudgetSnapshot]: ...


class TransactionSource(Protocol):
    async def list_since(self, user_id: str, since: datetime) -> List[TransactionSnapshot]: ...


class NotificationSink(Protocol):
    async def create(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        category: Optional[str] = None,
    ) -> None: ...


class NoticeSink(Protocol):
    def publish(self, user_id: str, notice: TransientNotice) -> None: ...


def classify(pct: Decimal, warn_threshold: Decimal | float = Decimal("80")) -> Band:
    if pct > 100:
        return Band.EXCEEDED
    if pct > Decimal(str(warn_threshold)):
        return Band.WARN
    return Band.NONE


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BudgetAlertEngine:
    """
    Session-scoped budget threshold alerts for one user.

    Each tick fetches the user's budgets and month-to-date transactions,
    recomputes spend per category and emits at most one alert per band per
    budget. Bands only move up within a session (WARN -> EXCEEDED); a fresh
    engine is created for every sign-in.
    """

    def __init__(
        self,
        user_id: str,
        budgets: BudgetSource,
        transactions: TransactionSource,
        notifications: NotificationSink,
        notices: NoticeSink,
        *,
        poll_interval: Optional[float] = None,
        motivational_delay: Optional[float] = None,
        warn_threshold: Optional[float] = None,
        timezone_name: Optional[str] = None,
        persist_timeout: Optional[float] = None,
        budget_alerts_enabled: Optional[bool] = None,
        motivational_enabled: Optional[bool] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.user_id = user_id
        self._budgets = budgets
        self._transactions = transactions
        self._notifications = notifications
        self._notices = notices

        self.poll_interval = settings.ALERT_POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
        self.motivational_delay = (
            settings.MOTIVATIONAL_DELAY_SECONDS if motivational_delay is None else motivational_delay
        )
        self.warn_threshold = Decimal(str(settings.WARN_THRESHOLD_PCT if warn_threshold is None else warn_threshold))
        self.timezone_name = timezone_name or settings.ALERT_TIMEZONE
        self.persist_timeout = (
            settings.NOTIFICATION_PERSIST_TIMEOUT_SECONDS if persist_timeout is None else persist_timeout
        )
        self.budget_alerts_enabled = (
            settings.ENABLE_BUDGET_ALERTS if budget_alerts_enabled is None else budget_alerts_enabled
        )
        self.motivational_enabled = (
            settings.ENABLE_MOTIVATIONAL if motivational_enabled is None else motivational_enabled
        )
        self._rng = rng or random.Random()
        self._clock = clock

        self.state = AlertState()
        self._tick_lock = asyncio.Lock()
        self._motivational_sent = False
        # Set once by stop(); an ended session never evaluates or emits again
        self._stopped = False
        self._poll_task: Optional[asyncio.Task] = None
        self._motivational_task: Optional[asyncio.Task] = None

    # --- lifecycle ---

    @property
    def running(self) -> bool:
        return self._poll_task is not None or self._motivational_task is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def motivational_sent(self) -> bool:
        return self._motivational_sent

    def start(self) -> None:
        if self._stopped:
            logger.warning("Alert session for user %s already ended; not restarting", self.user_id)
            return
        if self.running:
            return
        logger.info("Starting budget alert session for user %s", self.user_id)
        if self.budget_alerts_enabled:
            self._poll_task = asyncio.create_task(self._poll_loop(), name=f"budget-alerts:{self.user_id}")
        if self.motivational_enabled:
            self._schedule_motivational()

    async def stop(self) -> None:
        self._stopped = True
        tasks = [t for t in (self._poll_task, self._motivational_task) if t is not None]
        self._poll_task = None
        self._motivational_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Stopped budget alert session for user %s", self.user_id)

    async def __aenter__(self) -> "BudgetAlertEngine":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    # --- evaluation ---

    async def tick(self) -> bool:
        """
        Run one evaluation pass. Returns False when the tick was skipped,
        because another tick is in flight, a fetch failed or the session
        ended while the fetch was pending.
        """
        if self._stopped:
            return False
        if self._tick_lock.locked():
            logger.debug("Tick already in flight for user %s; skipping", self.user_id)
            return False
        async with self._tick_lock:
            since = month_start(self._clock(), self.timezone_name)
            try:
                budgets = await self._budgets.list_for_user(self.user_id)
                transactions = await self._transactions.list_since(self.user_id, since)
            except Exception as e:
                logger.warning("Budget alert tick skipped for user %s: fetch failed: %s", self.user_id, e)
                return False
            if self._stopped:
                logger.debug("Session for user %s ended during fetch; dropping tick", self.user_id)
                return False
            await self.evaluate(budgets, transactions)
            return True

    def detect(
        self,
        budgets: Sequence[BudgetSnapshot],
        transactions: Sequence[TransactionSnapshot],
    ) -> List[BudgetAlert]:
        """
        Classify every budget against fresh spend and claim the alerts that
        are due. Claimed keys are recorded in `state` before returning, so a
        later failure while emitting never leads to a second alert.
        """
        spend = spend_by_category(transactions)
        due: List[BudgetAlert] = []
        for budget in budgets:
            if budget.limit <= 0:
                continue
            spent = spend.get(budget.category, ZERO)
            pct = spent * 100 / budget.limit
            band = classify(pct, self.warn_threshold)
            if band is Band.NONE or not self.state.should_alert(budget.id, band):
                continue
            self.state.mark(budget.id, band)
            due.append(
                BudgetAlert(
                    budget_id=budget.id,
                    category=budget.category,
                    emoji=budget.emoji,
                    band=band,
                    spent=spent,
                    limit=budget.limit,
                    pct=pct,
                    warn_threshold=self.warn_threshold,
                )
            )
        return due

    async def evaluate(
        self,
        budgets: Sequence[BudgetSnapshot],
        transactions: Sequence[TransactionSnapshot],
    ) -> List[BudgetAlert]:
        if self._stopped:
            return []
        alerts = self.detect(budgets, transactions)
        for alert in alerts:
            if self._stopped:
                break
            logger.info(
                "Budget %s alert for user %s: %s at %.1f%%",
                alert.band.name, self.user_id, alert.category, alert.pct,
            )
            self._publish_notice(notice_for(alert))
            kind, title, message = notification_for(alert)
            await self._persist(kind, title, message, alert.category)
        return alerts

    # --- side effects ---

    def _publish_notice(self, notice: TransientNotice) -> None:
        try:
            self._notices.publish(self.user_id, notice)
        except Exception:
            logger.exception("Failed to publish notice for user %s", self.user_id)

    async def _persist(self, kind: NotificationType, title: str, message: str, category: Optional[str]) -> None:
        # At-most-once: failures are logged, never retried
        try:
            await asyncio.wait_for(
                self._notifications.create(self.user_id, kind, title, message, category),
                timeout=self.persist_timeout,
            )
        except Exception:
            logger.exception("Failed to persist %s notification for user %s", kind.value, self.user_id)

    async def _poll_loop(self) -> None:
        while True:
            try:
                await self.tick()
            except Exception:
                logger.exception("Unexpected error in budget alert tick for user %s", self.user_id)
            await asyncio.sleep(self.poll_interval)

    def _schedule_motivational(self) -> None:
        if self._motivational_sent:
            return
        self._motivational_sent = True
        self._motivational_task = asyncio.create_task(
            self._send_motivational(), name=f"motivational:{self.user_id}"
        )

    async def _send_motivational(self) -> None:
        await asyncio.sleep(self.motivational_delay)
        if self._stopped:
            return
        title, message = pick_motivational(self._rng)
        self._publish_notice(TransientNotice(title=title, description=message, severity=Severity.INFO, duration_ms=5000))
        await self._persist(NotificationType.MOTIVATIONAL, title, message, None)
