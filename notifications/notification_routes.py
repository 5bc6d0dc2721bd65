from __future__ import annotations

import uuid
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db.postgres import get_async_session
from notifications.notification_model import Notification, UnreadCount
from notifications.notification_repo import NotificationRepositoryPg
from settings.config import settings


router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_repo(session: AsyncSession = Depends(get_async_session)) -> NotificationRepositoryPg:
    return NotificationRepositoryPg(session)


@router.get("/", response_model=List[Notification])
async def list_notifications(
    user_id: uuid.UUID,
    limit: int = Query(settings.NOTIFICATION_LIST_LIMIT, ge=1, le=100),
    repo: NotificationRepositoryPg = Depends(get_notification_repo),
) -> List[Notification]:
    rows = await repo.list_recent(user_id, limit=limit)
    return [Notification.model_validate(r) for r in rows]


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(user_id: uuid.UUID, repo: NotificationRepositoryPg = Depends(get_notification_repo)) -> UnreadCount:
    return UnreadCount(unread=await repo.unread_count(user_id))


@router.post("/read-all")
async def mark_all_read(user_id: uuid.UUID, repo: NotificationRepositoryPg = Depends(get_notification_repo)) -> Dict[str, int]:
    updated = await repo.mark_all_read(user_id)
    return {"updated": updated}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: uuid.UUID,
    user_id: uuid.UUID,
    repo: NotificationRepositoryPg = Depends(get_notification_repo),
) -> Dict[str, str]:
    if not await repo.mark_read(user_id, notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"status": "read", "id": str(notification_id)}
