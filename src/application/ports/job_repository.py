"""
Job Record Repository Port (인터페이스)

Job Record Store: (id, owner_id) 복합 키 문서 저장소.
Worker(Job Processor)는 이 포트를 통해서만 Job 상태를 변경한다.
단일 키에 대해 read-after-write 일관성이 보장되어야 함.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

JobRecord = Dict[str, Any]


class IJobRepository(ABC):
    """Job Record 저장소 추상 인터페이스 (job family별 테이블 1개)"""

    @abstractmethod
    def get(self, job_id: str, owner_id: str) -> Optional[JobRecord]:
        """레코드 조회. 없으면 None"""
        pass

    @abstractmethod
    def put(self, record: JobRecord) -> None:
        """레코드 전체 저장 (덮어쓰기)"""
        pass

    @abstractmethod
    def update(self, job_id: str, owner_id: str, fields: Dict[str, Any]) -> JobRecord:
        """
        부분 업데이트. 갱신된 레코드 반환.
        레코드가 없으면 JobRecordNotFoundError.
        """
        pass
