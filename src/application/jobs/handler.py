"""
JobHandler - job 타입별 처리 유스케이스의 공통 골격

흐름:
1. Job Record 조회 (없으면 JobRecordNotFoundError → 재전달 대상)
2. 이미 종료 상태(completed/success/failed)면 스킵 (재전달 멱등성, 산출물 참조 보존)
3. queued → generating/deploying 전이 (재전달로 이미 진행 중이면 그대로 재실행)
4. execute() 실행 (외부 생성/배포 호출, 내부 재시도 없음)
5. 성공: 성공 상태 + 결과 필드 저장 → 알림
   실패: failed + error 저장 → 알림 → JobFailedError

레코드 저장이 항상 알림보다 먼저다 (알림 받은 쪽이 바로 조회해도 일관된 상태).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from src.application.jobs.errors import (
    JobFailedError,
    JobRecordNotFoundError,
    MessageDecodeError,
    describe_error,
)
from src.application.jobs.status import (
    IN_PROGRESS_STATUS,
    SUCCESS_STATUS,
    JobStatus,
    JobType,
    ensure_transition,
    is_terminal,
)
from src.application.ports.job_repository import IJobRepository, JobRecord
from src.application.ports.notifier import INotifier

if TYPE_CHECKING:
    from apps.shared.contracts.job_message import JobMessage, JobPayload

logger = logging.getLogger(__name__)

RESULT_OK = "ok"
RESULT_SKIP_TERMINAL = "skip:terminal"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UnsupportedJobTypeError(MessageDecodeError):
    """이 워커(큐)에 등록된 handler가 없는 job 타입"""


class JobHandler(ABC):
    """
    job 타입 하나에 대한 Job Processor.
    서브클래스는 execute()와 알림 payload만 정의한다.
    """

    job_type: JobType

    def __init__(self, repo: IJobRepository, notifier: INotifier) -> None:
        self._repo = repo
        self._notifier = notifier

    @property
    def running_status(self) -> JobStatus:
        return IN_PROGRESS_STATUS[self.job_type]

    @property
    def success_status(self) -> JobStatus:
        return SUCCESS_STATUS[self.job_type]

    # ------------------------------------------------------------------
    # 서브클래스 구현
    # ------------------------------------------------------------------

    @abstractmethod
    def execute(self, payload: "JobPayload", record: JobRecord) -> Dict[str, Any]:
        """실제 작업. 성공 시 레코드에 저장할 결과 필드 반환."""

    @abstractmethod
    def notification(self, payload: "JobPayload", status: JobStatus, extra: Dict[str, Any]) -> Dict[str, Any]:
        """상태 전이 알림 payload"""

    def on_started(self, payload: "JobPayload", record: JobRecord) -> None:
        """running 상태 저장 직후 hook (기본: 없음)"""

    # ------------------------------------------------------------------

    def handle(self, message: "JobMessage") -> str:
        """
        Returns:
            "ok" | "skip:terminal"

        Raises:
            JobFailedError: 처리 실패 (failed 상태 저장 완료)
            JobRecordNotFoundError / 저장소 예외: 재전달 대상
        """
        payload = message.payload()
        job_id, owner_id = payload.job_id, payload.owner_id

        record = self._repo.get(job_id, owner_id)
        if record is None:
            raise JobRecordNotFoundError(job_id, owner_id)

        current = str(record.get("status") or JobStatus.QUEUED.value)
        if is_terminal(current):
            logger.info(
                "IDEMPOTENT_SKIP | job_id=%s | job_type=%s | status=%s | reason=terminal",
                job_id,
                self.job_type.value,
                current,
            )
            return RESULT_SKIP_TERMINAL

        if current == self.running_status.value:
            logger.info("JOB_REDELIVERED | job_id=%s | status=%s | re-running", job_id, current)

        record = self._transition(job_id, owner_id, current, self.running_status, {})
        self.on_started(payload, record)

        try:
            result_fields = self.execute(payload, record)
        except Exception as e:
            error_message = describe_error(e)
            logger.warning(
                "JOB_PROCESSING_FAILED | job_id=%s | job_type=%s | error=%s",
                job_id,
                self.job_type.value,
                error_message[:200],
            )
            self._transition(
                job_id,
                owner_id,
                self.running_status.value,
                JobStatus.FAILED,
                {"error": error_message},
            )
            self.notify(
                owner_id,
                JobStatus.FAILED,
                self.notification(payload, JobStatus.FAILED, {"error": error_message}),
            )
            raise JobFailedError(job_id, error_message, cause=e) from e

        record = self._transition(
            job_id,
            owner_id,
            self.running_status.value,
            self.success_status,
            result_fields,
        )
        self.notify(
            owner_id,
            self.success_status,
            self.notification(payload, self.success_status, self.success_extra(record)),
        )
        return RESULT_OK

    def success_extra(self, record: JobRecord) -> Dict[str, Any]:
        return {}

    def _transition(
        self,
        job_id: str,
        owner_id: str,
        current: str,
        target: JobStatus,
        fields: Dict[str, Any],
    ) -> JobRecord:
        ensure_transition(self.job_type, job_id, current, target)
        updates = dict(fields)
        updates["status"] = target.value
        updates["updated_at"] = utc_now_iso()
        record = self._repo.update(job_id, owner_id, updates)
        logger.info("JOB_STATUS | job_id=%s | %s -> %s", job_id, current, target.value)
        return record

    def notify(self, owner_id: str, status: JobStatus, payload: Dict[str, Any]) -> None:
        """fire-and-forget: 알림 실패는 job 결과에 영향 없음"""
        try:
            self._notifier.notify(owner_id, status.value, payload)
        except Exception as e:
            logger.warning(
                "NOTIFY_FAILED | owner_id=%s | event=%s | job_id=%s | error=%s",
                owner_id,
                status.value,
                payload.get("job_id"),
                e,
            )


class JobDispatcher:
    """JobType → JobHandler. 워커 루프는 job 타입별 분기를 알지 못한다."""

    def __init__(self, handlers: Iterable[JobHandler]) -> None:
        self._handlers: Dict[JobType, JobHandler] = {}
        for h in handlers:
            if h.job_type in self._handlers:
                raise ValueError(f"duplicate handler for {h.job_type.value}")
            self._handlers[h.job_type] = h

    def handler_for(self, job_type: JobType) -> Optional[JobHandler]:
        return self._handlers.get(job_type)

    def dispatch(self, message: "JobMessage") -> str:
        handler = self.handler_for(message.type)
        if handler is None:
            raise UnsupportedJobTypeError(f"no handler registered for job type {message.type.value}")
        return handler.handle(message)
