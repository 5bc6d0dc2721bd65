from __future__ import annotations

import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from alerts.alert_models import TransientNotice
from alerts.notice_feed import NoticeFeed
from alerts.session_registry import AlertSessionRegistry, get_notice_feed, get_session_registry


router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def start_session(
    user_id: uuid.UUID,
    registry: AlertSessionRegistry = Depends(get_session_registry),
) -> Dict[str, str]:
    registry.start_session(str(user_id))
    return {"status": "started", "user_id": str(user_id)}


@router.delete("/sessions")
async def end_session(
    user_id: uuid.UUID,
    registry: AlertSessionRegistry = Depends(get_session_registry),
) -> Dict[str, str]:
    if not await registry.end_session(str(user_id)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active alert session")
    return {"status": "ended", "user_id": str(user_id)}


@router.post("/sessions/tick")
async def tick_now(
    user_id: uuid.UUID,
    registry: AlertSessionRegistry = Depends(get_session_registry),
) -> Dict[str, Any]:
    engine = registry.get(str(user_id))
    if engine is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active alert session")
    evaluated = await engine.tick()
    return {"evaluated": evaluated}


@router.get("/notices", response_model=List[TransientNotice])
async def drain_notices(user_id: uuid.UUID, feed: NoticeFeed = Depends(get_notice_feed)) -> List[TransientNotice]:
    return feed.drain(str(user_id))
