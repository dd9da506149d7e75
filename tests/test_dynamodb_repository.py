from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from src.application.jobs.errors import JobRecordNotFoundError
from src.infrastructure.db.dynamodb_job_repository import DynamoJobRepository


def _repo(table):
    return DynamoJobRepository("snapinfra-code-generations", table=table)


def test_get_uses_consistent_read_and_converts_decimals():
    table = MagicMock()
    table.get_item.return_value = {
        "Item": {"id": "cg-1", "owner_id": "user-1", "file_size": Decimal("2048"), "ratio": Decimal("0.5")}
    }

    record = _repo(table).get("cg-1", "user-1")

    table.get_item.assert_called_once_with(Key={"id": "cg-1", "owner_id": "user-1"}, ConsistentRead=True)
    assert record["file_size"] == 2048
    assert record["ratio"] == 0.5


def test_get_missing_returns_none():
    table = MagicMock()
    table.get_item.return_value = {}

    assert _repo(table).get("cg-1", "user-1") is None


def test_put_requires_key():
    with pytest.raises(ValueError):
        _repo(MagicMock()).put({"id": "cg-1"})


def test_put_converts_floats():
    table = MagicMock()

    _repo(table).put({"id": "dep-1", "owner_id": "user-1", "config": {"cpu": 0.25}})

    item = table.put_item.call_args.kwargs["Item"]
    assert item["config"]["cpu"] == Decimal("0.25")


def test_update_is_conditional_on_existing_record():
    table = MagicMock()
    table.update_item.return_value = {"Attributes": {"id": "cg-1", "owner_id": "user-1", "status": "generating"}}

    record = _repo(table).update("cg-1", "user-1", {"status": "generating", "id": "ignored"})

    kwargs = table.update_item.call_args.kwargs
    assert kwargs["Key"] == {"id": "cg-1", "owner_id": "user-1"}
    assert kwargs["UpdateExpression"] == "SET #f0 = :v0"
    assert kwargs["ConditionExpression"] == "attribute_exists(#pk)"
    assert kwargs["ExpressionAttributeNames"] == {"#pk": "id", "#f0": "status"}
    assert kwargs["ExpressionAttributeValues"] == {":v0": "generating"}
    assert record["status"] == "generating"


def test_update_missing_record_raises_not_found():
    table = MagicMock()
    table.update_item.side_effect = ClientError(
        {"Error": {"Code": "ConditionalCheckFailedException", "Message": "The conditional request failed"}},
        "UpdateItem",
    )

    with pytest.raises(JobRecordNotFoundError):
        _repo(table).update("cg-404", "user-1", {"status": "generating"})


def test_update_other_errors_propagate():
    table = MagicMock()
    table.update_item.side_effect = ClientError(
        {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
        "UpdateItem",
    )

    with pytest.raises(ClientError):
        _repo(table).update("cg-1", "user-1", {"status": "generating"})
