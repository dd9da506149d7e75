"""
Notifier Port (인터페이스)

상태 전이 이벤트를 구독 채널(email/webhook/SMS, SSE 등)로 fan-out.
Core 입장에서 fire-and-forget: 실패는 로그만 남기고 재시도하지 않으며 job 완료를 막지 않는다.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class INotifier(ABC):
    @abstractmethod
    def notify(self, owner_id: str, event_type: str, payload: Dict[str, Any]) -> None:
        pass
