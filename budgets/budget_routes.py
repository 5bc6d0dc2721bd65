from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from budgets.budget_model import Budget, BudgetUpsert
from budgets.budget_repo import BudgetRepositoryPg
from db.postgres import get_async_session


router = APIRouter(prefix="/budgets", tags=["budgets"])


def get_budget_repo(session: AsyncSession = Depends(get_async_session)) -> BudgetRepositoryPg:
    return BudgetRepositoryPg(session)


@router.get("/", response_model=List[Budget])
async def list_budgets(user_id: uuid.UUID, repo: BudgetRepositoryPg = Depends(get_budget_repo)) -> List[Budget]:
    rows = await repo.list_for_user(user_id)
    return [Budget.model_validate(r) for r in rows]


@router.post("/", response_model=Budget)
async def upsert_budget(budget: BudgetUpsert, repo: BudgetRepositoryPg = Depends(get_budget_repo)) -> Budget:
    row = await repo.upsert(budget)
    return Budget.model_validate(row)
