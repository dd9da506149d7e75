# PATH: src/infrastructure/storage/s3_adapter.py
# S3 Blob 스토리지 어댑터: IBlobStorage 구현
# 버킷은 생성 시 주입 (워커 Config.S3_BUCKET_NAME)

from __future__ import annotations

from typing import Any, Optional

from libs.s3_client.client import get_s3_client
from libs.s3_client.presign import PRESIGN_DOWNLOAD_EXPIRES, create_presigned_get_url
from src.application.ports.storage import BlobObject, IBlobStorage


class S3BlobStorageAdapter(IBlobStorage):
    """S3 IBlobStorage 구현."""

    def __init__(self, bucket: str, s3: Any = None, region_name: Optional[str] = None) -> None:
        if not bucket:
            raise ValueError("bucket is required")
        self.bucket = bucket
        self._s3 = s3 or get_s3_client(region_name)

    def upload(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict | None = None,
    ) -> BlobObject:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type or "application/octet-stream",
        }
        if metadata:
            params["Metadata"] = {str(k): str(v) for k, v in metadata.items()}
        self._s3.put_object(**params)
        return BlobObject(key=key, url=f"s3://{self.bucket}/{key}", size=len(data))

    def download(self, key: str) -> bytes:
        resp = self._s3.get_object(Bucket=self.bucket, Key=key)
        return resp["Body"].read()

    def presigned_url(self, key: str, expires_in: int = PRESIGN_DOWNLOAD_EXPIRES) -> str:
        return create_presigned_get_url(self._s3, self.bucket, key, expires_in=expires_in)
