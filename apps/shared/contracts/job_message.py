# apps/shared/contracts/job_message.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Union
import json
from datetime import datetime, timezone

from src.application.jobs.errors import MessageDecodeError
from src.application.jobs.status import JobType


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class CodeGenerationPayload:
    job_id: str
    owner_id: str
    project_id: str
    prompt_type: str
    prompt: str


@dataclass(frozen=True)
class DeploymentPayload:
    job_id: str
    owner_id: str
    project_id: str
    environment: str
    config: Dict[str, Any] = field(default_factory=dict)


JobPayload = Union[CodeGenerationPayload, DeploymentPayload]

_REQUIRED_DATA_FIELDS = {
    JobType.CODE_GENERATION: ("owner_id", "project_id", "prompt_type", "prompt"),
    JobType.DEPLOYMENT: ("owner_id", "project_id", "environment"),
}


@dataclass(frozen=True)
class JobMessage:
    """
    Producer → Worker 로 전달되는 envelope (Contract)

    원칙:
    - 큐에는 레코드 참조(id, owner_id)와 처리에 필요한 최소 데이터만 싣는다.
    - id는 Job Record의 id와 같다.
    - enqueuedAt은 로그용 (순서 보장 없음).
    """

    id: str
    type: JobType
    data: Dict[str, Any]
    enqueued_at: str = ""

    @staticmethod
    def new(payload: JobPayload) -> "JobMessage":
        if isinstance(payload, CodeGenerationPayload):
            job_type = JobType.CODE_GENERATION
        else:
            job_type = JobType.DEPLOYMENT
        return JobMessage(
            id=payload.job_id,
            type=job_type,
            data=asdict(payload),
            enqueued_at=_now_iso(),
        )

    @property
    def owner_id(self) -> str:
        return str(self.data["owner_id"])

    def payload(self) -> JobPayload:
        d = self.data
        if self.type == JobType.CODE_GENERATION:
            return CodeGenerationPayload(
                job_id=self.id,
                owner_id=str(d["owner_id"]),
                project_id=str(d["project_id"]),
                prompt_type=str(d["prompt_type"]),
                prompt=str(d["prompt"]),
            )
        return DeploymentPayload(
            job_id=self.id,
            owner_id=str(d["owner_id"]),
            project_id=str(d["project_id"]),
            environment=str(d["environment"]),
            config=dict(d.get("config") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "data": self.data,
            "enqueuedAt": self.enqueued_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @staticmethod
    def from_dict(data: Any) -> "JobMessage":
        if not isinstance(data, dict):
            raise MessageDecodeError(f"envelope must be an object, got {type(data).__name__}")

        job_id = data.get("id")
        if not isinstance(job_id, str) or not job_id:
            raise MessageDecodeError("envelope id missing")

        try:
            job_type = JobType(data.get("type"))
        except ValueError:
            raise MessageDecodeError(f"unknown job type: {data.get('type')!r}") from None

        body = data.get("data")
        if not isinstance(body, dict):
            raise MessageDecodeError("envelope data must be an object")
        missing = [k for k in _REQUIRED_DATA_FIELDS[job_type] if body.get(k) in (None, "")]
        if missing:
            raise MessageDecodeError(f"envelope data missing fields: {', '.join(missing)}")
        if body.get("job_id") not in (None, job_id):
            raise MessageDecodeError("envelope id does not match data.job_id")
        if job_type == JobType.DEPLOYMENT and not isinstance(body.get("config") or {}, dict):
            raise MessageDecodeError("deployment config must be an object")

        return JobMessage(
            id=job_id,
            type=job_type,
            data=body,
            enqueued_at=str(data.get("enqueuedAt") or ""),
        )

    @staticmethod
    def from_json(raw: Optional[str]) -> "JobMessage":
        if not raw:
            raise MessageDecodeError("empty message body")
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MessageDecodeError(f"invalid JSON body: {e}") from e
        except RecursionError as e:
            # 과도한 중첩 (예: "[[[[..."): 재시도해도 같은 결과
            raise MessageDecodeError("invalid JSON body: nesting too deep") from e
        return JobMessage.from_dict(data)
