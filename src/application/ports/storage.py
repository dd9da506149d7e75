# PATH: src/application/ports/storage.py
# Blob 스토리지 포트: 생성 산출물(zip) 업로드·다운로드 (버킷은 구현체 생성 시 주입)

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class BlobObject:
    key: str
    url: str
    size: int


class IBlobStorage(ABC):
    """Blob 스토리지 업로드/다운로드"""

    @abstractmethod
    def upload(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict | None = None,
    ) -> BlobObject:
        """객체 업로드 후 key/url/size 반환."""
        ...

    @abstractmethod
    def download(self, key: str) -> bytes:
        """객체 내용을 바이트로 반환."""
        ...

    def presigned_url(self, key: str, expires_in: int = 3600) -> str:
        """다운로드용 임시 URL. 기본 구현: key 그대로 반환."""
        return key
