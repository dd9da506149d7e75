"""
JobSQSQueue - IJobQueue 구현체

libs.queue.QueueClient를 큐 하나(job family 하나)에 바인딩.
큐 설정값은 이름 또는 전체 URL 모두 허용.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from libs.queue import QueueClient, get_queue_client
from src.application.ports.job_queue import IJobQueue


class JobSQSQueue(IJobQueue):
    """IJobQueue 포트 구현 (QueueClient 위임)"""

    def __init__(self, queue_name: str, client: Optional[QueueClient] = None) -> None:
        self.name = queue_name
        self._client = client or get_queue_client()

    def send(self, body: Dict[str, Any], attributes: Optional[Dict[str, Any]] = None) -> str:
        return self._client.send_message(
            queue_name=self.name,
            message=body,
            attributes=attributes,
        )

    def receive(self, max_messages: int = 5, wait_time_seconds: int = 20) -> List[Dict[str, Any]]:
        return self._client.receive_messages(
            queue_name=self.name,
            max_messages=max_messages,
            wait_time_seconds=wait_time_seconds,
        )

    def delete(self, receipt_handle: str) -> bool:
        return self._client.delete_message(queue_name=self.name, receipt_handle=receipt_handle)

    def get_depth(self) -> int:
        return self._client.get_queue_depth(self.name)
