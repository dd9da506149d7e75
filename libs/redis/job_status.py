"""
Redis 기반 Job 이벤트 채널

- 상태 스냅샷 키: job:{job_id}:status (TTL 1시간, 폴링 UI용 캐시)
- 이벤트 채널: job:{job_id}:events, user:{owner_id}:events (SSE/WebSocket 구독자)

SSOT는 Job Record Store. 여기 값은 알림용 사본이며 유실돼도 무방.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Optional

from libs.redis.client import get_redis_client

logger = logging.getLogger(__name__)

STATUS_TTL_SECONDS = 3600  # 1시간


def set_job_status(
    job_id: str,
    *,
    status: str,
    extra: Optional[dict] = None,
) -> bool:
    """Job 상태 스냅샷 기록 (Redis)"""
    client = get_redis_client()
    if not client:
        return False

    key = f"job:{job_id}:status"
    data = {"status": status, "updated_at": time.time()}
    if extra:
        data.update(extra)

    try:
        client.set(key, json.dumps(data, default=str), ex=STATUS_TTL_SECONDS)
        return True
    except Exception as e:
        logger.warning("Redis job status set failed: %s", e)
        return False


def publish_job_status_event(job_id: str, owner_id: str, payload: dict) -> int:
    """
    Job 상태 변경 이벤트 발행 (Pub/Sub)

    Returns: 이벤트를 받은 구독자 수 합계. Redis 미사용 시 0.
    """
    client = get_redis_client()
    if not client:
        return 0

    body = json.dumps(payload, default=str)
    receivers = 0
    for channel in (f"job:{job_id}:events", f"user:{owner_id}:events"):
        receivers += int(client.publish(channel, body) or 0)
    return receivers
