from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List

from alerts.alert_models import TransientNotice


class NoticeFeed:
    """
    Per-user toast queue drained by the client.

    Publishing never blocks: each queue is bounded and drops the oldest
    notice on overflow.
    """

    def __init__(self, maxlen: int = 50) -> None:
        self._maxlen = maxlen
        self._queues: Dict[str, Deque[TransientNotice]] = {}

    def publish(self, user_id: str, notice: TransientNotice) -> None:
        queue = self._queues.get(user_id)
        if queue is None:
            queue = self._queues[user_id] = deque(maxlen=self._maxlen)
        queue.append(notice)

    def drain(self, user_id: str) -> List[TransientNotice]:
        queue = self._queues.pop(user_id, None)
        return list(queue) if queue else []

    def discard(self, user_id: str) -> None:
        self._queues.pop(user_id, None)

    def pending(self, user_id: str) -> int:
        return len(self._queues.get(user_id, ()))
