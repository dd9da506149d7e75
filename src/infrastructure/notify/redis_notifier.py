"""
RedisNotifier - INotifier 구현체 (Redis pub/sub)

상태 스냅샷(job:{id}:status) 갱신 후 job/user 채널로 이벤트 발행.
Redis 미설정이면 아무것도 하지 않는다.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from libs.redis.job_status import publish_job_status_event, set_job_status
from src.application.ports.notifier import INotifier

logger = logging.getLogger(__name__)


class RedisNotifier(INotifier):
    def notify(self, owner_id: str, event_type: str, payload: Dict[str, Any]) -> None:
        job_id = str(payload.get("job_id") or "")
        if not job_id:
            return
        set_job_status(job_id, status=str(payload.get("status") or event_type), extra=payload)
        receivers = publish_job_status_event(job_id, owner_id, {**payload, "event": event_type})
        logger.debug("Redis job event job_id=%s event=%s receivers=%s", job_id, event_type, receivers)
