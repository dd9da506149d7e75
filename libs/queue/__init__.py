"""
Queue 추상화 레이어

AWS SQS만 사용 (job family별 큐: code-generation, deployment)

사용 예:
    from libs.queue import get_queue_client

    queue = get_queue_client()
    message_id = queue.send_message(queue_name="snapinfra-deployments", message={"id": "123"})
    messages = queue.receive_messages(queue_name="snapinfra-deployments", max_messages=5)
"""

from .client import (
    QueueClient,
    QueueSendError,
    QueueUnavailableError,
    SQSQueueClient,
    get_queue_client,
)

__all__ = [
    "QueueClient",
    "QueueSendError",
    "QueueUnavailableError",
    "SQSQueueClient",
    "get_queue_client",
]
