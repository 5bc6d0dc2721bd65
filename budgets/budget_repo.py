from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from budgets.budget_model import BudgetUpsert
from db.models import BudgetRow


class BudgetRepositoryPg:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, budget: BudgetUpsert) -> BudgetRow:
        stmt = (
            insert(BudgetRow)
            .values(
                user_id=budget.user_id,
                category=budget.category,
                budget_limit=budget.budget_limit,
                emoji=budget.emoji,
            )
            .on_conflict_do_update(
                constraint="uq_budgets_user_category",
                set_={"budget_limit": budget.budget_limit, "emoji": budget.emoji},
            )
            .returning(BudgetRow)
        )
        res = await self._session.execute(stmt)
        row = res.scalar_one()
        await self._session.commit()
        return row

    async def list_for_user(self, user_id: uuid.UUID) -> List[BudgetRow]:
        stmt = select(BudgetRow).where(BudgetRow.user_id == user_id).order_by(BudgetRow.category)
        res = await self._session.execute(stmt)
        return list(res.scalars().all())
