from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from db.postgres import get_async_session
from transactions.transaction_model import Transaction, TransactionCreate
from transactions.transaction_repo import TransactionRepositoryPg


router = APIRouter(prefix="/transactions", tags=["transactions"])


def get_transaction_repo(session: AsyncSession = Depends(get_async_session)) -> TransactionRepositoryPg:
    return TransactionRepositoryPg(session)


@router.get("/", response_model=List[Transaction])
async def list_transactions(
    user_id: uuid.UUID,
    since: Optional[datetime] = None,
    limit: int = Query(200, ge=1, le=1000),
    repo: TransactionRepositoryPg = Depends(get_transaction_repo),
) -> List[Transaction]:
    rows = await repo.list_for_user(user_id, since=since, limit=limit)
    return [Transaction.model_validate(r) for r in rows]


@router.post("/", response_model=Transaction, status_code=201)
async def create_transaction(
    txn: TransactionCreate,
    repo: TransactionRepositoryPg = Depends(get_transaction_repo),
) -> Transaction:
    row = await repo.create(txn)
    return Transaction.model_validate(row)
