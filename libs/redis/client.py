"""
Redis 클라이언트 - Fallback 지원

REDIS_HOST 미설정 또는 연결 실패 시 None 반환.
Redis는 job 이벤트 pub/sub 채널로만 사용하므로, None이면 호출부는 조용히 skip.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional

logger = logging.getLogger(__name__)

_redis_client: Optional[object] = None
_redis_available: Optional[bool] = None
_lock = threading.Lock()


def get_redis_client():
    """
    Redis 클라이언트 반환.
    워커 루프 두 개가 동시에 호출할 수 있으므로 최초 연결은 lock 안에서.
    """
    global _redis_client, _redis_available

    if _redis_available is False:
        return None
    if _redis_client is not None:
        return _redis_client

    with _lock:
        if _redis_available is False:
            return None
        if _redis_client is not None:
            return _redis_client

        host = os.getenv("REDIS_HOST")
        if not host:
            logger.debug("REDIS_HOST not set, Redis disabled")
            _redis_available = False
            return None

        import redis

        port = int(os.getenv("REDIS_PORT", "6379"))
        password = os.getenv("REDIS_PASSWORD") or None
        db = int(os.getenv("REDIS_DB", "0"))

        try:
            client = redis.Redis(
                host=host,
                port=port,
                password=password,
                db=db,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            client.ping()
        except redis.RedisError as e:
            logger.warning("Redis connection failed (job events disabled): %s", e)
            _redis_available = False
            return None

        _redis_client = client
        _redis_available = True
        logger.info("Redis connected: %s:%s db=%s", host, port, db)
        return client


def is_redis_available() -> bool:
    """Redis 사용 가능 여부"""
    return get_redis_client() is not None


def reset_redis_state():
    """테스트용: Redis 상태 리셋"""
    global _redis_client, _redis_available
    _redis_client = None
    _redis_available = None
