from src.infrastructure.notify.composite import CompositeNotifier
from src.infrastructure.notify.redis_notifier import RedisNotifier
from src.infrastructure.notify.sns_notifier import SNSNotifier

__all__ = ["CompositeNotifier", "RedisNotifier", "SNSNotifier"]
