"""
Redis 알림 레이어

SQS + Worker + DynamoDB 아키텍처는 그대로 유지.
Redis는 job 상태 변경 이벤트의 pub/sub 채널로만 사용.

Redis 미설정/장애 시 해당 채널만 비활성화 (job 처리에는 영향 없음).
"""

from libs.redis.client import get_redis_client, is_redis_available, reset_redis_state

__all__ = [
    "get_redis_client",
    "is_redis_available",
    "reset_redis_state",
]
