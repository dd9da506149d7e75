"""
CompositeNotifier - 여러 채널로 fan-out

채널 하나의 실패가 다른 채널이나 job 처리로 번지지 않는다 (로그만).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from src.application.ports.notifier import INotifier

logger = logging.getLogger(__name__)


class CompositeNotifier(INotifier):
    def __init__(self, notifiers: Iterable[INotifier]) -> None:
        self._notifiers = list(notifiers)

    def notify(self, owner_id: str, event_type: str, payload: Dict[str, Any]) -> None:
        for notifier in self._notifiers:
            try:
                notifier.notify(owner_id, event_type, payload)
            except Exception as e:
                logger.warning(
                    "Notifier %s failed event=%s job_id=%s: %s",
                    type(notifier).__name__,
                    event_type,
                    payload.get("job_id"),
                    e,
                )
