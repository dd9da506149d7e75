import json

import boto3
import pytest
from botocore.stub import Stubber

from libs.queue import QueueSendError, QueueUnavailableError, SQSQueueClient
from src.infrastructure.queue import JobSQSQueue

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/snapinfra-code-generation"


@pytest.fixture
def sqs():
    client = boto3.client(
        "sqs",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


def test_queue_url_lookup_is_cached(sqs):
    client, stubber = sqs
    stubber.add_response("get_queue_url", {"QueueUrl": QUEUE_URL}, {"QueueName": "snapinfra-code-generation"})
    for _ in range(2):
        stubber.add_response("receive_message", {"Messages": []})

    queue = SQSQueueClient(sqs=client)
    assert queue.receive_messages("snapinfra-code-generation") == []
    assert queue.receive_messages("snapinfra-code-generation") == []


def test_full_url_skips_lookup(sqs):
    client, stubber = sqs
    stubber.add_response(
        "receive_message",
        {"Messages": [{"MessageId": "m-1", "ReceiptHandle": "rh-1", "Body": "{}"}]},
        {
            "QueueUrl": QUEUE_URL,
            "MaxNumberOfMessages": 10,
            "WaitTimeSeconds": 20,
            "MessageAttributeNames": ["All"],
            "AttributeNames": ["All"],
        },
    )

    messages = SQSQueueClient(sqs=client).receive_messages(QUEUE_URL, max_messages=50, wait_time_seconds=60)

    assert messages[0]["ReceiptHandle"] == "rh-1"


def test_send_message_with_attributes(sqs):
    client, stubber = sqs
    body = {"id": "cg-1", "type": "code-generation", "data": {"prompt": "로그인 폼"}}
    stubber.add_response(
        "send_message",
        {"MessageId": "m-1"},
        {
            "QueueUrl": QUEUE_URL,
            "MessageBody": json.dumps(body, ensure_ascii=False),
            "MessageAttributes": {
                "jobType": {"DataType": "String", "StringValue": "code-generation"},
            },
        },
    )

    message_id = SQSQueueClient(sqs=client).send_message(
        QUEUE_URL, body, attributes={"jobType": "code-generation", "userId": None}
    )

    assert message_id == "m-1"


def test_send_failure_raises(sqs):
    client, stubber = sqs
    stubber.add_client_error("send_message", service_error_code="ThrottlingException")

    with pytest.raises(QueueSendError):
        SQSQueueClient(sqs=client).send_message(QUEUE_URL, {"id": "cg-1"})


def test_send_to_unknown_queue_raises_send_error(sqs):
    client, stubber = sqs
    stubber.add_client_error("get_queue_url", service_error_code="AWS.SimpleQueueService.NonExistentQueue")

    with pytest.raises(QueueSendError):
        SQSQueueClient(sqs=client).send_message("missing-queue", {"id": "cg-1"})


def test_receive_failure_is_unavailable(sqs):
    client, stubber = sqs
    stubber.add_client_error("receive_message", service_error_code="InvalidClientTokenId")

    with pytest.raises(QueueUnavailableError):
        SQSQueueClient(sqs=client).receive_messages(QUEUE_URL)


def test_delete_returns_false_on_error(sqs):
    client, stubber = sqs
    stubber.add_response("delete_message", {}, {"QueueUrl": QUEUE_URL, "ReceiptHandle": "rh-1"})
    stubber.add_client_error("delete_message", service_error_code="ReceiptHandleIsInvalid")

    queue = SQSQueueClient(sqs=client)
    assert queue.delete_message(QUEUE_URL, "rh-1") is True
    assert queue.delete_message(QUEUE_URL, "rh-2") is False


def test_job_queue_adapter_reports_depth(sqs):
    client, stubber = sqs
    stubber.add_response(
        "get_queue_attributes",
        {"Attributes": {"ApproximateNumberOfMessages": "7"}},
        {"QueueUrl": QUEUE_URL, "AttributeNames": ["ApproximateNumberOfMessages"]},
    )

    queue = JobSQSQueue(QUEUE_URL, client=SQSQueueClient(sqs=client))

    assert queue.get_depth() == 7
