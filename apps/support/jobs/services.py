"""
Job 제출 서비스 (요청 처리 레이어용)

순서 고정: 레코드 저장(queued) → enqueue → queued 알림
알림은 Producer가 아니라 여기(호출부) 책임.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from apps.support.jobs.producer import JobProducer
from src.application.jobs.handler import utc_now_iso
from src.application.jobs.status import JobStatus, JobType
from src.application.ports.code_generator import PROMPT_TYPES
from src.application.ports.job_repository import IJobRepository, JobRecord
from src.application.ports.notifier import INotifier

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("development", "staging", "production")


def _new_record(owner_id: str, project_id: str, **fields: Any) -> JobRecord:
    now = utc_now_iso()
    record: JobRecord = {
        "id": str(uuid.uuid4()),
        "owner_id": owner_id,
        "project_id": project_id,
        "status": JobStatus.QUEUED.value,
        "created_at": now,
        "updated_at": now,
    }
    record.update(fields)
    return record


def _notify_queued(notifier: Optional[INotifier], owner_id: str, payload: Dict[str, Any]) -> None:
    if notifier is None:
        return
    try:
        notifier.notify(owner_id, JobStatus.QUEUED.value, payload)
    except Exception as e:
        logger.warning("queued notification failed job_id=%s: %s", payload.get("job_id"), e)


def submit_code_generation(
    repo: IJobRepository,
    producer: JobProducer,
    *,
    owner_id: str,
    project_id: str,
    prompt_type: str,
    prompt: str,
    notifier: Optional[INotifier] = None,
) -> JobRecord:
    if prompt_type not in PROMPT_TYPES:
        raise ValueError(f"prompt_type must be one of {', '.join(PROMPT_TYPES)}")
    if not prompt or not prompt.strip():
        raise ValueError("prompt is required")

    record = _new_record(
        owner_id,
        project_id,
        prompt_type=prompt_type,
        prompt=prompt,
        generated_files=[],
    )
    repo.put(record)
    producer.enqueue_code_generation(record["id"], owner_id, project_id, prompt_type, prompt)
    _notify_queued(
        notifier,
        owner_id,
        {
            "type": JobType.CODE_GENERATION.value,
            "job_id": record["id"],
            "project_id": project_id,
            "status": JobStatus.QUEUED.value,
        },
    )
    return record


def submit_deployment(
    repo: IJobRepository,
    producer: JobProducer,
    *,
    owner_id: str,
    project_id: str,
    environment: str,
    config: Optional[Dict[str, Any]] = None,
    notifier: Optional[INotifier] = None,
) -> JobRecord:
    if environment not in ENVIRONMENTS:
        raise ValueError(f"environment must be one of {', '.join(ENVIRONMENTS)}")

    record = _new_record(owner_id, project_id, environment=environment, config=dict(config or {}))
    repo.put(record)
    producer.enqueue_deployment(record["id"], owner_id, project_id, environment, record["config"])
    _notify_queued(
        notifier,
        owner_id,
        {
            "type": JobType.DEPLOYMENT.value,
            "job_id": record["id"],
            "project_id": project_id,
            "environment": environment,
            "status": JobStatus.QUEUED.value,
        },
    )
    return record
