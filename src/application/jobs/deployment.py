"""
DeploymentJobHandler - 배포 job

queued → deploying (알림) → 배포 실행 → success (알림)
실패 시 failed + error 저장 → 알림 → JobFailedError
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict

from src.application.jobs.handler import JobHandler, utc_now_iso
from src.application.jobs.status import JobStatus, JobType
from src.application.ports.deployer import IDeployer
from src.application.ports.job_repository import IJobRepository, JobRecord
from src.application.ports.notifier import INotifier

logger = logging.getLogger(__name__)


class DeploymentJobHandler(JobHandler):
    job_type = JobType.DEPLOYMENT

    def __init__(self, repo: IJobRepository, notifier: INotifier, deployer: IDeployer) -> None:
        super().__init__(repo, notifier)
        self._deployer = deployer

    def on_started(self, payload, record: JobRecord) -> None:
        self.notify(
            payload.owner_id,
            JobStatus.DEPLOYING,
            self.notification(payload, JobStatus.DEPLOYING, {}),
        )

    def execute(self, payload, record: JobRecord) -> Dict[str, Any]:
        started = time.time()
        result = self._deployer.deploy(payload.project_id, payload.environment, payload.config)
        logger.info(
            "DEPLOY_DONE | job_id=%s | environment=%s | url=%s | duration=%.2f",
            payload.job_id,
            payload.environment,
            result.url,
            time.time() - started,
        )
        return {"deployed_url": result.url, "deployed_at": utc_now_iso()}

    def success_extra(self, record: JobRecord) -> Dict[str, Any]:
        return {"url": record.get("deployed_url")}

    def notification(self, payload, status: JobStatus, extra: Dict[str, Any]) -> Dict[str, Any]:
        body = {
            "type": self.job_type.value,
            "job_id": payload.job_id,
            "project_id": payload.project_id,
            "environment": payload.environment,
            "status": status.value,
        }
        body.update(extra)
        return body
