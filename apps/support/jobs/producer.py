"""
SQS 기반 Job Producer

요청 처리 레이어(API)에서 동기적으로 호출.

전제: 호출 전에 Job Record가 queued 상태로 이미 저장되어 있어야 한다.
(메시지가 먼저 보이면 워커가 저장보다 앞서 레코드를 못 찾을 수 있음)

메시지 형식:
{
    "id": str,                 # Job Record id
    "type": "code-generation" | "deployment",
    "data": {...},             # owner_id, project_id, prompt_type/prompt 또는 environment/config
    "enqueuedAt": "ISO8601"
}

전송 실패는 QueueSendError로 호출부에 그대로 전파된다.
레코드는 queued로 남는다 (재시도/정리는 호출부 판단).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from apps.shared.contracts.job_message import (
    CodeGenerationPayload,
    DeploymentPayload,
    JobMessage,
    JobPayload,
)
from libs.queue import QueueClient
from src.application.jobs.status import JobType
from src.application.ports.job_queue import IJobQueue
from src.infrastructure.queue import JobSQSQueue

logger = logging.getLogger(__name__)

QUEUE_NAME_CODE_GENERATION = "snapinfra-code-generation"
QUEUE_NAME_DEPLOYMENT = "snapinfra-deployments"


def default_queue_names() -> Dict[JobType, str]:
    return {
        JobType.CODE_GENERATION: os.environ.get("SQS_CODE_GENERATION_QUEUE", QUEUE_NAME_CODE_GENERATION),
        JobType.DEPLOYMENT: os.environ.get("SQS_DEPLOYMENT_QUEUE", QUEUE_NAME_DEPLOYMENT),
    }


def _attributes(message: JobMessage) -> Dict[str, Any]:
    attrs: Dict[str, Any] = {
        "jobType": message.type.value,
        "projectId": message.data.get("project_id"),
    }
    if message.type == JobType.CODE_GENERATION:
        attrs["userId"] = message.data.get("owner_id")
    else:
        attrs["environment"] = message.data.get("environment")
    return attrs


class JobProducer:
    """job 타입별 큐로 envelope 전송"""

    def __init__(
        self,
        queues: Optional[Mapping[JobType, IJobQueue]] = None,
        client: Optional[QueueClient] = None,
    ) -> None:
        if queues is None:
            queues = {
                job_type: JobSQSQueue(name, client=client)
                for job_type, name in default_queue_names().items()
            }
        self._queues = dict(queues)

    def enqueue(self, job_type: JobType, payload: JobPayload) -> str:
        """
        Returns:
            str: 큐가 부여한 MessageId (로그용)
        """
        message = JobMessage.new(payload)
        if message.type != JobType(job_type):
            raise ValueError(f"payload {type(payload).__name__} does not match job type {job_type}")

        queue = self._queues.get(message.type)
        if queue is None:
            raise ValueError(f"no queue configured for job type {message.type.value}")

        message_id = queue.send(message.to_dict(), attributes=_attributes(message))
        logger.info(
            "JOB_ENQUEUED | job_id=%s | job_type=%s | queue=%s | message_id=%s",
            message.id,
            message.type.value,
            queue.name,
            message_id,
        )
        return message_id or message.id

    def enqueue_code_generation(
        self,
        job_id: str,
        owner_id: str,
        project_id: str,
        prompt_type: str,
        prompt: str,
    ) -> str:
        return self.enqueue(
            JobType.CODE_GENERATION,
            CodeGenerationPayload(
                job_id=job_id,
                owner_id=owner_id,
                project_id=project_id,
                prompt_type=prompt_type,
                prompt=prompt,
            ),
        )

    def enqueue_deployment(
        self,
        job_id: str,
        owner_id: str,
        project_id: str,
        environment: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> str:
        return self.enqueue(
            JobType.DEPLOYMENT,
            DeploymentPayload(
                job_id=job_id,
                owner_id=owner_id,
                project_id=project_id,
                environment=environment,
                config=dict(config or {}),
            ),
        )
