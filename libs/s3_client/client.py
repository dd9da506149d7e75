# libs/s3_client/client.py

from __future__ import annotations

import os
from typing import Any, Optional

import boto3
from botocore.client import Config

# ---------------------------------------------------------------------
# S3 Client
# ---------------------------------------------------------------------


def get_s3_client(region_name: Optional[str] = None) -> Any:
    """
    S3 client (s3v4 서명: presigned URL 생성에도 같은 client 사용)
    """
    return boto3.client(
        "s3",
        region_name=region_name or os.getenv("S3_BUCKET_REGION") or os.getenv("AWS_REGION", "us-east-1"),
        config=Config(signature_version="s3v4"),
    )
