from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import NotificationRow
from notifications.notification_model import NotificationType


class NotificationRepositoryPg:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        category: Optional[str] = None,
    ) -> NotificationRow:
        row = NotificationRow(
            user_id=user_id,
            type=NotificationType(type).value,
            title=title,
            message=message,
            category=category,
        )
        self._session.add(row)
        await self._session.flush()
        await self._session.commit()
        return row

    async def list_recent(self, user_id: uuid.UUID, limit: int = 20) -> list[NotificationRow]:
        stmt = (
            select(NotificationRow)
            .where(NotificationRow.user_id == user_id)
            .order_by(desc(NotificationRow.created_at))
            .limit(limit)
        )
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    async def unread_count(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(NotificationRow).where(
            NotificationRow.user_id == user_id, NotificationRow.is_read.is_(False)
        )
        res = await self._session.execute(stmt)
        return int(res.scalar_one())

    async def mark_read(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> bool:
        stmt = (
            update(NotificationRow)
            .where(NotificationRow.id == notification_id, NotificationRow.user_id == user_id)
            .values(is_read=True)
        )
        res = await self._session.execute(stmt)
        await self._session.commit()
        return res.rowcount > 0

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        stmt = (
            update(NotificationRow)
            .where(NotificationRow.user_id == user_id, NotificationRow.is_read.is_(False))
            .values(is_read=True)
        )
        res = await self._session.execute(stmt)
        await self._session.commit()
        return res.rowcount
