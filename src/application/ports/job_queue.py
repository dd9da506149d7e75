"""
Job Queue Port (인터페이스)

job family 하나에 대응하는 durable queue.
receive는 raw 메시지(Body, ReceiptHandle, MessageId ...)를 그대로 돌려주고,
envelope 디코딩은 워커 루프가 담당한다.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class IJobQueue(ABC):
    """Job Queue 추상 인터페이스"""

    name: str

    @abstractmethod
    def send(self, body: Dict[str, Any], attributes: Dict[str, Any] | None = None) -> str:
        pass

    @abstractmethod
    def receive(self, max_messages: int = 5, wait_time_seconds: int = 20) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def delete(self, receipt_handle: str) -> bool:
        pass

    def get_depth(self) -> int:
        return 0
