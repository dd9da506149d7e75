# PATH: src/infrastructure/storage/__init__.py
# S3 Blob 스토리지 어댑터: IBlobStorage 구현
# Code generation 워커에서 zip 산출물 업로드에 사용

from src.infrastructure.storage.s3_adapter import S3BlobStorageAdapter

__all__ = ["S3BlobStorageAdapter"]
