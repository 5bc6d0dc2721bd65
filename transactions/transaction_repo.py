from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Select, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import TransactionRow
from transactions.transaction_model import TransactionCreate


class TransactionRepositoryPg:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, txn: TransactionCreate) -> TransactionRow:
        row = TransactionRow(user_id=txn.user_id, category=txn.category, amount=txn.amount, note=txn.note)
        self._session.add(row)
        await self._session.flush()
        await self._session.refresh(row)
        await self._session.commit()
        return row

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        since: Optional[datetime] = None,
        limit: Optional[int] = 200,
    ) -> list[TransactionRow]:
        stmt: Select[tuple[TransactionRow]] = select(TransactionRow).where(TransactionRow.user_id == user_id)
        if since:
            stmt = stmt.where(TransactionRow.created_at >= since)
        stmt = stmt.order_by(desc(TransactionRow.created_at))
        if limit is not None:
            stmt = stmt.limit(limit)
        res = await self._session.execute(stmt)
        return list(res.scalars().all())
