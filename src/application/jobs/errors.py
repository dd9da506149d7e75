"""
Job 파이프라인 예외

워커 루프의 ACK 판단 기준:
- MessageDecodeError: 복구 불가 → 즉시 ACK(delete)
- JobFailedError: FAILED 상태 + error 저장 완료 → ACK (재전달해도 결과는 같음)
- 그 외 예외 (JobRecordNotFoundError 포함): ACK 하지 않음 → visibility timeout 후 재전달
"""
from __future__ import annotations

from typing import Optional

ERROR_MESSAGE_MAX_LENGTH = 2000


class JobError(Exception):
    """Job 파이프라인 예외 base"""


class MessageDecodeError(JobError):
    """큐 메시지 envelope 파싱 실패 (재시도해도 성공할 수 없음)"""


class JobRecordNotFoundError(JobError):
    def __init__(self, job_id: str, owner_id: str):
        self.job_id = job_id
        self.owner_id = owner_id
        super().__init__(f"Job record not found: id={job_id} owner_id={owner_id}")


class InvalidTransitionError(JobError):
    def __init__(self, job_id: str, current: str, target: str):
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(f"Invalid status transition for job {job_id}: {current} -> {target}")


class JobFailedError(JobError):
    """처리 실패. 레코드에 FAILED + error가 이미 기록된 뒤에만 발생."""

    def __init__(self, job_id: str, error_message: str, cause: Optional[BaseException] = None):
        self.job_id = job_id
        self.error_message = error_message
        self.cause = cause
        super().__init__(f"Job {job_id} failed: {error_message}")


def describe_error(e: BaseException) -> str:
    """레코드/알림에 기록할 사람이 읽을 수 있는 에러 문자열 (빈 문자열 금지)"""
    text = str(e).strip() or type(e).__name__
    return text[:ERROR_MESSAGE_MAX_LENGTH]
