"""
JobWorkerLoop - job family 하나에 대한 SQS 폴링/디스패치 루프

Flow (iteration 1회):
1. stop token 확인 (set 이면 종료)
2. Long Polling 으로 최대 N개 수신 (0개면 짧게 대기 후 재시도)
3. 메시지별:
   - envelope 디코딩 실패 → 즉시 삭제 (재시도해도 성공 불가)
   - 처리 성공 / 종료 상태 스킵 → 삭제
   - JobFailedError (failed 저장 완료) → 삭제
   - 그 외 예외 → 삭제하지 않음 → visibility timeout 후 SQS가 재전달
     (재시도 횟수는 SQS maxReceiveCount / DLQ 가 관리)
4. 수신 자체 실패 (큐 접근 불가 등) → 로그 후 백오프, 루프는 계속
5. 메시지 처리 중 예상 못한 예외 → 로그만, 삭제하지 않음 (다음 메시지 계속)

처리 중인 job은 끝까지 수행한다. stop 이후 배치에 남은 메시지는 처리하지 않고
큐에 남겨 재전달되게 한다.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from apps.shared.contracts.job_message import JobMessage
from libs.queue import QueueUnavailableError
from src.application.jobs.errors import JobFailedError, MessageDecodeError
from src.application.jobs.handler import JobDispatcher
from src.application.ports.job_queue import IJobQueue

logger = logging.getLogger(__name__)

OUTCOME_COMPLETED = "completed"
OUTCOME_FAILED = "failed"
OUTCOME_DISCARDED = "discarded"
OUTCOME_RETRY = "retry"
OUTCOME_SKIPPED = "skipped"


def _queue_wait_seconds(enqueued_at: str, now: float) -> Optional[float]:
    if not enqueued_at:
        return None
    try:
        return max(0.0, now - datetime.fromisoformat(enqueued_at).timestamp())
    except (ValueError, OverflowError, OSError):
        return None


class JobWorkerLoop:
    def __init__(
        self,
        queue: IJobQueue,
        dispatcher: JobDispatcher,
        *,
        name: Optional[str] = None,
        max_messages: int = 5,
        wait_time_seconds: int = 20,
        empty_backoff_seconds: float = 1.0,
        error_backoff_seconds: float = 5.0,
    ) -> None:
        self._queue = queue
        self._dispatcher = dispatcher
        self.name = name or queue.name
        self._max_messages = max_messages
        self._wait_time_seconds = wait_time_seconds
        self._empty_backoff = empty_backoff_seconds
        self._error_backoff = error_backoff_seconds

    def run(self, stop_event: threading.Event) -> None:
        """stop_event 가 set 될 때까지 블록"""
        try:
            depth: Any = self._queue.get_depth()
        except QueueUnavailableError as e:
            depth = f"unavailable ({e})"
        logger.info(
            "Job worker loop started | loop=%s | queue=%s | depth=%s | wait_time=%ss | batch=%s",
            self.name,
            self._queue.name,
            depth,
            self._wait_time_seconds,
            self._max_messages,
        )

        while not stop_event.is_set():
            try:
                messages = self._queue.receive(
                    max_messages=self._max_messages,
                    wait_time_seconds=self._wait_time_seconds,
                )
            except QueueUnavailableError as e:
                logger.warning("SQS unavailable | loop=%s | retry in %ss | %s", self.name, self._error_backoff, e)
                stop_event.wait(self._error_backoff)
                continue
            except Exception as e:
                logger.exception("Unexpected error while polling | loop=%s | %s", self.name, e)
                stop_event.wait(self._error_backoff)
                continue

            if not messages:
                stop_event.wait(self._empty_backoff)
                continue

            for index, raw in enumerate(messages):
                if stop_event.is_set():
                    logger.info(
                        "Graceful shutdown: %d message(s) left for redelivery | loop=%s",
                        len(messages) - index,
                        self.name,
                    )
                    break
                try:
                    self.process_message(raw)
                except Exception as e:
                    # 메시지 단위 격리: 삭제하지 않음 → visibility timeout 후 재전달
                    logger.exception(
                        "SQS_MESSAGE_UNHANDLED | loop=%s | message_id=%s | error=%s",
                        self.name,
                        raw.get("MessageId"),
                        e,
                    )

        logger.info("Job worker loop stopped | loop=%s", self.name)

    def process_message(self, raw: Dict[str, Any]) -> str:
        receipt_handle = raw.get("ReceiptHandle")
        if not receipt_handle:
            logger.error("Message missing ReceiptHandle | loop=%s | message_id=%s", self.name, raw.get("MessageId"))
            return OUTCOME_SKIPPED

        request_id = str(uuid.uuid4())[:8]
        try:
            message = JobMessage.from_json(raw.get("Body"))
        except MessageDecodeError as e:
            logger.error(
                "SQS_MESSAGE_DISCARDED | request_id=%s | loop=%s | message_id=%s | reason=%s",
                request_id,
                self.name,
                raw.get("MessageId"),
                e,
            )
            self._ack(receipt_handle, raw)
            return OUTCOME_DISCARDED

        started = time.time()
        queue_wait = _queue_wait_seconds(message.enqueued_at, started)
        logger.info(
            "SQS_MESSAGE_RECEIVED | request_id=%s | job_id=%s | job_type=%s | receive_count=%s | queue_wait_sec=%s",
            request_id,
            message.id,
            message.type.value,
            (raw.get("Attributes") or {}).get("ApproximateReceiveCount", "?"),
            f"{queue_wait:.2f}" if queue_wait is not None else "unknown",
        )

        try:
            result = self._dispatcher.dispatch(message)
        except MessageDecodeError as e:
            logger.error(
                "SQS_MESSAGE_DISCARDED | request_id=%s | job_id=%s | reason=%s",
                request_id,
                message.id,
                e,
            )
            self._ack(receipt_handle, raw)
            return OUTCOME_DISCARDED
        except JobFailedError as e:
            logger.warning(
                "SQS_JOB_FAILED | request_id=%s | job_id=%s | error=%s | processing_duration=%.2f",
                request_id,
                message.id,
                e.error_message[:200],
                time.time() - started,
            )
            self._ack(receipt_handle, raw)
            return OUTCOME_FAILED
        except Exception as e:
            # 삭제하지 않음: visibility timeout 후 재전달, maxReceiveCount 초과 시 DLQ
            logger.exception(
                "SQS_JOB_RETRY | request_id=%s | job_id=%s | error=%s | processing_duration=%.2f",
                request_id,
                message.id,
                str(e)[:200],
                time.time() - started,
            )
            return OUTCOME_RETRY

        self._ack(receipt_handle, raw)
        logger.info(
            "SQS_JOB_COMPLETED | request_id=%s | job_id=%s | result=%s | processing_duration=%.2f",
            request_id,
            message.id,
            result,
            time.time() - started,
        )
        return OUTCOME_COMPLETED

    def _ack(self, receipt_handle: str, raw: Dict[str, Any]) -> None:
        if not self._queue.delete(receipt_handle):
            logger.warning(
                "SQS delete failed, message will be redelivered | loop=%s | message_id=%s",
                self.name,
                raw.get("MessageId"),
            )
