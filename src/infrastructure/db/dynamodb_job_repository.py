"""
DynamoJobRepository - IJobRepository 구현체

DynamoDB 테이블 1개 = job family 1개 (code-generations, deployments).
키: (id, owner_id) 복합 키 → owner 단위 격리를 저장소 레벨에서 강제.

- get: ConsistentRead (processor 자신의 직전 쓰기를 반드시 관측)
- update: attribute_exists 조건 → 레코드 없으면 JobRecordNotFoundError (upsert 금지)
- 낙관적 동시성 체크 없음: 재전달 경합 시 last-writer-wins
"""
from __future__ import annotations

import json
import logging
import os
from decimal import Decimal
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from src.application.jobs.errors import JobRecordNotFoundError
from src.application.ports.job_repository import IJobRepository, JobRecord

logger = logging.getLogger(__name__)


def _to_dynamo(value: Any) -> Any:
    """float → Decimal (boto3 resource는 float를 거부)"""
    return json.loads(json.dumps(value, default=str), parse_float=Decimal)


def _from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


def _get_table(table_name: str, region_name: Optional[str] = None) -> Any:
    import boto3

    dynamodb = boto3.resource("dynamodb", region_name=region_name or os.getenv("AWS_REGION", "us-east-1"))
    return dynamodb.Table(table_name)


class DynamoJobRepository(IJobRepository):
    """IJobRepository 구현 (DynamoDB)"""

    def __init__(self, table_name: str, table: Any = None, region_name: Optional[str] = None) -> None:
        self.table_name = table_name
        self._table = table if table is not None else _get_table(table_name, region_name)

    @staticmethod
    def _key(job_id: str, owner_id: str) -> Dict[str, str]:
        return {"id": job_id, "owner_id": owner_id}

    def get(self, job_id: str, owner_id: str) -> Optional[JobRecord]:
        resp = self._table.get_item(Key=self._key(job_id, owner_id), ConsistentRead=True)
        item = resp.get("Item")
        return _from_dynamo(item) if item else None

    def put(self, record: JobRecord) -> None:
        if not record.get("id") or not record.get("owner_id"):
            raise ValueError("record requires id and owner_id")
        self._table.put_item(Item=_to_dynamo(record))

    def update(self, job_id: str, owner_id: str, fields: Dict[str, Any]) -> JobRecord:
        fields = {k: v for k, v in fields.items() if k not in ("id", "owner_id")}
        if not fields:
            record = self.get(job_id, owner_id)
            if record is None:
                raise JobRecordNotFoundError(job_id, owner_id)
            return record

        names = {"#pk": "id"}
        values: Dict[str, Any] = {}
        assignments = []
        for i, (name, value) in enumerate(fields.items()):
            names[f"#f{i}"] = name
            values[f":v{i}"] = _to_dynamo(value)
            assignments.append(f"#f{i} = :v{i}")

        try:
            resp = self._table.update_item(
                Key=self._key(job_id, owner_id),
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            code = (e.response.get("Error") or {}).get("Code")
            if code == "ConditionalCheckFailedException":
                raise JobRecordNotFoundError(job_id, owner_id) from e
            logger.error("DynamoDB update failed table=%s job_id=%s: %s", self.table_name, job_id, e)
            raise
        return _from_dynamo(resp.get("Attributes") or {})
