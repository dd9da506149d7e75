# libs/s3_client/presign.py

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

PRESIGN_DOWNLOAD_EXPIRES = 60 * 60  # 1 hour

# ---------------------------------------------------------------------
# Presigned URLs
# ---------------------------------------------------------------------


def create_presigned_get_url(
    s3: Any,
    bucket: str,
    key: str,
    expires_in: int = PRESIGN_DOWNLOAD_EXPIRES,
) -> str:
    """
    Generate presigned GET url (download)
    """
    return s3.generate_presigned_url(
        ClientMethod="get_object",
        Params={
            "Bucket": bucket,
            "Key": key,
        },
        ExpiresIn=expires_in,
    )
