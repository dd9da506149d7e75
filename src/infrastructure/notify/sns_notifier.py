"""
SNSNotifier - INotifier 구현체 (AWS SNS 토픽)

토픽 구독자(email/webhook/SMS)는 MessageAttributes 기반 FilterPolicy로 이벤트를 고른다:
notificationType, userId, projectId, status, environment
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

from src.application.ports.notifier import INotifier

logger = logging.getLogger(__name__)

SUBJECT_MAX_LENGTH = 100

_SUBJECT_PREFIX = {
    "code-generation": "Code Generation",
    "deployment": "Deployment",
}


def _subject(notification_type: str, event_type: str, payload: Dict[str, Any]) -> str:
    subject = f"{_SUBJECT_PREFIX.get(notification_type, 'Job')} {event_type}"
    if payload.get("environment"):
        subject = f"{subject} - {payload['environment']}"
    return subject[:SUBJECT_MAX_LENGTH]


class SNSNotifier(INotifier):
    def __init__(self, topic_arn: str, sns: Any = None, region_name: Optional[str] = None) -> None:
        if not topic_arn:
            raise ValueError("topic_arn is required")
        self.topic_arn = topic_arn
        if sns is None:
            import boto3

            sns = boto3.client("sns", region_name=region_name or os.getenv("AWS_REGION", "us-east-1"))
        self._sns = sns

    def notify(self, owner_id: str, event_type: str, payload: Dict[str, Any]) -> None:
        notification_type = str(payload.get("type") or "job")
        message = {
            **payload,
            "type": notification_type,
            "userId": owner_id,
            "event": event_type,
            "timestamp": int(time.time() * 1000),
        }
        attributes = {
            "notificationType": notification_type,
            "userId": owner_id,
            "projectId": payload.get("project_id"),
            "status": payload.get("status") or event_type,
            "environment": payload.get("environment"),
        }
        resp = self._sns.publish(
            TopicArn=self.topic_arn,
            Message=json.dumps(message, ensure_ascii=False, default=str),
            Subject=_subject(notification_type, event_type, payload),
            MessageAttributes={
                name: {"DataType": "String", "StringValue": str(value)}
                for name, value in attributes.items()
                if value not in (None, "")
            },
        )
        logger.debug("SNS published event=%s message_id=%s", event_type, resp.get("MessageId"))
