"""
CodeGenerationJobHandler - AI 코드 생성 job

queued → generating → (LLM 호출 → zip 패키징 → blob 업로드) → completed
파일 목록, blob key/url/size는 completed 전이와 함께 한 번에 저장한다.
완료 알림에는 presigned 다운로드 URL을 싣는다.
"""
from __future__ import annotations

import io
import logging
import time
import zipfile
from typing import Any, Dict, List

from src.application.jobs.handler import JobHandler
from src.application.jobs.status import JobStatus, JobType
from src.application.ports.code_generator import GeneratedFile, ICodeGenerator
from src.application.ports.job_repository import IJobRepository, JobRecord
from src.application.ports.notifier import INotifier
from src.application.ports.storage import IBlobStorage

logger = logging.getLogger(__name__)

ARCHIVE_CONTENT_TYPE = "application/zip"


def code_archive_key(project_id: str, job_id: str) -> str:
    return f"code-generations/{project_id}/{job_id}/archive.zip"


def build_zip_archive(files: List[GeneratedFile]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for f in files:
            zf.writestr(f.path.lstrip("/"), f.content)
    return buf.getvalue()


class CodeGenerationJobHandler(JobHandler):
    job_type = JobType.CODE_GENERATION

    def __init__(
        self,
        repo: IJobRepository,
        notifier: INotifier,
        generator: ICodeGenerator,
        storage: IBlobStorage,
        download_url_expires: int = 3600,
    ) -> None:
        super().__init__(repo, notifier)
        self._generator = generator
        self._storage = storage
        self._download_url_expires = download_url_expires

    def execute(self, payload, record: JobRecord) -> Dict[str, Any]:
        started = time.time()
        files = self._generator.generate(payload.prompt_type, payload.prompt)
        if not files:
            raise RuntimeError("code generator returned no files")
        logger.info(
            "CODEGEN_GENERATED | job_id=%s | prompt_type=%s | files=%d | duration=%.2f",
            payload.job_id,
            payload.prompt_type,
            len(files),
            time.time() - started,
        )

        archive = build_zip_archive(files)
        blob = self._storage.upload(
            code_archive_key(payload.project_id, payload.job_id),
            archive,
            ARCHIVE_CONTENT_TYPE,
            metadata={
                "projectId": payload.project_id,
                "codeGenId": payload.job_id,
                "type": "code-archive",
            },
        )
        logger.info("CODEGEN_UPLOADED | job_id=%s | key=%s | size=%d", payload.job_id, blob.key, blob.size)

        return {
            "generated_files": [f.to_dict() for f in files],
            "blob_key": blob.key,
            "blob_url": blob.url,
            "file_size": blob.size,
        }

    def success_extra(self, record: JobRecord) -> Dict[str, Any]:
        key = record.get("blob_key")
        if not key:
            return {}
        try:
            url = self._storage.presigned_url(key, expires_in=self._download_url_expires)
        except Exception as e:
            logger.warning("presign failed job_id=%s key=%s: %s", record.get("id"), key, e)
            url = record.get("blob_url")
        return {"download_url": url}

    def notification(self, payload, status: JobStatus, extra: Dict[str, Any]) -> Dict[str, Any]:
        body = {
            "type": self.job_type.value,
            "job_id": payload.job_id,
            "project_id": payload.project_id,
            "status": status.value,
        }
        body.update(extra)
        return body
