"""
Job 상태 머신

두 job family가 같은 모양의 상태 머신을 공유한다:

    code-generation: queued -> generating -> completed | failed
    deployment:      queued -> deploying  -> success   | failed

- 전이는 Job Processor만 수행 (HTTP 레이어, Producer는 queued 생성만)
- 성공 종료 상태와 failed는 모두 흡수 상태 (한 번 들어가면 나오지 않음)
- 처리 시작 후 queued로 되돌아가지 않음
- in-progress -> in-progress 는 허용 (재전달 시 재실행, 레코드 덮어쓰기)
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet

from src.application.jobs.errors import InvalidTransitionError


class JobType(str, Enum):
    CODE_GENERATION = "code-generation"
    DEPLOYMENT = "deployment"


class JobStatus(str, Enum):
    QUEUED = "queued"
    GENERATING = "generating"
    DEPLOYING = "deploying"
    COMPLETED = "completed"
    SUCCESS = "success"
    FAILED = "failed"


IN_PROGRESS_STATUS: Dict[JobType, JobStatus] = {
    JobType.CODE_GENERATION: JobStatus.GENERATING,
    JobType.DEPLOYMENT: JobStatus.DEPLOYING,
}

SUCCESS_STATUS: Dict[JobType, JobStatus] = {
    JobType.CODE_GENERATION: JobStatus.COMPLETED,
    JobType.DEPLOYMENT: JobStatus.SUCCESS,
}

TERMINAL_STATUSES: FrozenSet[JobStatus] = frozenset(
    {JobStatus.COMPLETED, JobStatus.SUCCESS, JobStatus.FAILED}
)


def _allowed(job_type: JobType) -> Dict[JobStatus, FrozenSet[JobStatus]]:
    running = IN_PROGRESS_STATUS[job_type]
    done = SUCCESS_STATUS[job_type]
    return {
        JobStatus.QUEUED: frozenset({running}),
        running: frozenset({running, done, JobStatus.FAILED}),
    }


def can_transition(job_type: JobType, current: str, target: str) -> bool:
    try:
        cur = JobStatus(current)
        tgt = JobStatus(target)
    except ValueError:
        return False
    return tgt in _allowed(JobType(job_type)).get(cur, frozenset())


def ensure_transition(job_type: JobType, job_id: str, current: str, target: str) -> None:
    if not can_transition(job_type, current, target):
        raise InvalidTransitionError(job_id, getattr(current, "value", current), getattr(target, "value", target))


def is_terminal(status: str) -> bool:
    try:
        return JobStatus(status) in TERMINAL_STATUSES
    except ValueError:
        return False
