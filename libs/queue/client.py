"""
Queue 클라이언트 추상화

프로덕션: AWS SQS (job family별 큐 1개씩)
- send_message: 실패 시 QueueSendError (호출부로 동기 전파)
- receive_messages: 전송 계층 장애 시 QueueUnavailableError (워커는 백오프 후 재시도)
- delete_message: ACK. 실패해도 visibility timeout 후 재전달되므로 bool 반환
"""

from __future__ import annotations

import json
import logging
import os
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# 로컬에서 AWS 자격 증명 없을 때 로그 스팸 방지: 인증 오류는 한 번만 로그
_last_auth_error_log = 0.0
_AUTH_ERROR_LOG_INTERVAL = 60.0  # 초

# SQS ReceiveMessage 한도
MAX_RECEIVE_BATCH = 10
MAX_WAIT_TIME_SECONDS = 20


class QueueUnavailableError(Exception):
    """SQS 접근 불가 (자격 증명 없음/네트워크 등). 워커는 이걸 잡고 백오프 후 재시도."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class QueueSendError(Exception):
    """메시지 전송 실패. enqueue 호출부로 그대로 전파된다."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


def _is_auth_error(e: Exception) -> bool:
    from botocore.exceptions import ClientError

    if isinstance(e, ClientError):
        code = (e.response or {}).get("Error", {}).get("Code", "")
        return code in (
            "InvalidClientTokenId",
            "UnrecognizedClientException",
            "SignatureDoesNotMatch",
            "InvalidSignatureException",
        )
    return False


def _log_auth_error_once(queue_name: str, op: str, e: Exception) -> None:
    global _last_auth_error_log
    now = time.time()
    if now - _last_auth_error_log >= _AUTH_ERROR_LOG_INTERVAL:
        logger.warning(
            "SQS %s (%s): %s (AWS credentials missing or expired?)",
            op,
            queue_name,
            e,
        )
        _last_auth_error_log = now


def _string_attributes(attributes: Optional[Dict[str, Any]]) -> Dict[str, Dict[str, str]]:
    """{"jobType": "deployment"} -> SQS MessageAttributes (None 값은 제외)"""
    out: Dict[str, Dict[str, str]] = {}
    for name, value in (attributes or {}).items():
        if value is None or value == "":
            continue
        out[name] = {"DataType": "String", "StringValue": str(value)}
    return out


class QueueClient(ABC):
    """Queue 클라이언트 추상 인터페이스"""

    @abstractmethod
    def send_message(
        self,
        queue_name: str,
        message: Dict[str, Any],
        attributes: Optional[Dict[str, Any]] = None,
    ) -> str:
        """메시지 전송. MessageId 반환"""

    @abstractmethod
    def receive_messages(
        self,
        queue_name: str,
        max_messages: int = 1,
        wait_time_seconds: int = 20,
    ) -> List[Dict[str, Any]]:
        """메시지 수신 (Long Polling). 없으면 빈 리스트"""

    @abstractmethod
    def delete_message(self, queue_name: str, receipt_handle: str) -> bool:
        """메시지 삭제 (ACK)"""

    def get_queue_depth(self, queue_name: str) -> int:
        """대기 중인 메시지 수 (근사값). 기본 구현은 0."""
        return 0


class SQSQueueClient(QueueClient):
    """AWS SQS 기반 큐 클라이언트"""

    def __init__(self, region_name: Optional[str] = None, sqs: Any = None):
        import boto3

        self.region_name = region_name or os.getenv("AWS_REGION", "us-east-1")
        self.sqs = sqs or boto3.client("sqs", region_name=self.region_name)
        self._queue_urls: Dict[str, str] = {}
        logger.info("SQSQueueClient initialized: %s", self.region_name)

    def _get_queue_url(self, queue_name: str) -> str:
        """큐 이름 또는 전체 URL → URL (이름 조회 결과는 캐시)"""
        if queue_name.startswith("https://") or queue_name.startswith("http://"):
            return queue_name
        cached = self._queue_urls.get(queue_name)
        if cached:
            return cached

        from botocore.exceptions import BotoCoreError, ClientError

        try:
            response = self.sqs.get_queue_url(QueueName=queue_name)
        except (ClientError, BotoCoreError) as e:
            if _is_auth_error(e):
                _log_auth_error_once(queue_name, "get_queue_url", e)
            raise QueueUnavailableError(f"Queue URL unavailable for {queue_name}: {e}", cause=e) from e
        url = response["QueueUrl"]
        self._queue_urls[queue_name] = url
        return url

    def send_message(
        self,
        queue_name: str,
        message: Dict[str, Any],
        attributes: Optional[Dict[str, Any]] = None,
    ) -> str:
        """SQS에 메시지 전송"""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            queue_url = self._get_queue_url(queue_name)
        except QueueUnavailableError as e:
            raise QueueSendError(str(e), cause=e.cause) from e

        params: Dict[str, Any] = {
            "QueueUrl": queue_url,
            "MessageBody": json.dumps(message, ensure_ascii=False),
        }
        message_attributes = _string_attributes(attributes)
        if message_attributes:
            params["MessageAttributes"] = message_attributes

        try:
            response = self.sqs.send_message(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to send message to %s: %s", queue_name, e)
            raise QueueSendError(f"Failed to send message to {queue_name}: {e}", cause=e) from e

        message_id = response.get("MessageId") or ""
        logger.debug("Message sent to %s: %s", queue_name, message_id)
        return message_id

    def receive_messages(
        self,
        queue_name: str,
        max_messages: int = 1,
        wait_time_seconds: int = 20,
    ) -> List[Dict[str, Any]]:
        """SQS에서 메시지 수신"""
        from botocore.exceptions import BotoCoreError, ClientError

        queue_url = self._get_queue_url(queue_name)
        try:
            response = self.sqs.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=max(1, min(MAX_RECEIVE_BATCH, max_messages)),
                WaitTimeSeconds=max(0, min(MAX_WAIT_TIME_SECONDS, wait_time_seconds)),
                MessageAttributeNames=["All"],
                AttributeNames=["All"],
            )
        except (ClientError, BotoCoreError) as e:
            if _is_auth_error(e):
                _log_auth_error_once(queue_name, "receive_message", e)
            raise QueueUnavailableError(f"Receive unavailable for {queue_name}: {e}", cause=e) from e
        return response.get("Messages", [])

    def delete_message(self, queue_name: str, receipt_handle: str) -> bool:
        """SQS 메시지 삭제"""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            queue_url = self._get_queue_url(queue_name)
            self.sqs.delete_message(
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle,
            )
            return True
        except (ClientError, BotoCoreError, QueueUnavailableError) as e:
            logger.error("Failed to delete message from %s: %s", queue_name, e)
            return False

    def get_queue_depth(self, queue_name: str) -> int:
        from botocore.exceptions import BotoCoreError, ClientError

        queue_url = self._get_queue_url(queue_name)
        try:
            response = self.sqs.get_queue_attributes(
                QueueUrl=queue_url,
                AttributeNames=["ApproximateNumberOfMessages"],
            )
        except (ClientError, BotoCoreError) as e:
            raise QueueUnavailableError(f"Queue attributes unavailable for {queue_name}: {e}", cause=e) from e
        count = (response.get("Attributes") or {}).get("ApproximateNumberOfMessages")
        return int(count) if count else 0


def get_queue_client(region_name: Optional[str] = None) -> QueueClient:
    """SQS 큐 클라이언트 반환"""
    return SQSQueueClient(region_name=region_name)
