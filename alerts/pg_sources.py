from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from budgets.budget_model import BudgetSnapshot
from budgets.budget_repo import BudgetRepositoryPg
from notifications.notification_model import NotificationType
from notifications.notification_repo import NotificationRepositoryPg
from transactions.transaction_model import TransactionSnapshot
from transactions.transaction_repo import TransactionRepositoryPg


# Each call opens its own short-lived session; engines outlive any request.


class PgBudgetSource:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_for_user(self, user_id: str) -> List[BudgetSnapshot]:
        async with self._session_factory() as session:
            rows = await BudgetRepositoryPg(session).list_for_user(uuid.UUID(user_id))
        return [BudgetSnapshot(id=r.id, category=r.category, limit=r.budget_limit, emoji=r.emoji) for r in rows]


class PgTransactionSource:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_since(self, user_id: str, since: datetime) -> List[TransactionSnapshot]:
        async with self._session_factory() as session:
            rows = await TransactionRepositoryPg(session).list_for_user(uuid.UUID(user_id), since=since, limit=None)
        return [TransactionSnapshot(category=r.category, amount=r.amount, created_at=r.created_at) for r in rows]


class PgNotificationSink:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        category: Optional[str] = None,
    ) -> None:
        async with self._session_factory() as session:
            await NotificationRepositoryPg(session).create(
                uuid.UUID(user_id), type=type, title=title, message=message, category=category
            )
