import pytest

from apps.shared.contracts.job_message import JobMessage
from apps.support.jobs.producer import JobProducer
from apps.support.jobs.services import submit_code_generation, submit_deployment
from libs.queue import QueueSendError
from src.application.jobs.status import JobType
from tests.fakes import FakeQueue


@pytest.fixture
def queues():
    return {
        JobType.CODE_GENERATION: FakeQueue(name="snapinfra-code-generation"),
        JobType.DEPLOYMENT: FakeQueue(name="snapinfra-deployments"),
    }


def test_code_generation_goes_to_its_queue(queues):
    producer = JobProducer(queues=queues)

    message_id = producer.enqueue_code_generation("cg-1", "user-1", "proj-1", "api", "todo api")

    assert message_id == "msg-1"
    assert queues[JobType.DEPLOYMENT].sent == []
    body, attributes = queues[JobType.CODE_GENERATION].sent[0]
    message = JobMessage.from_dict(body)
    assert message.id == "cg-1"
    assert message.type is JobType.CODE_GENERATION
    assert message.payload().prompt == "todo api"
    assert attributes == {"jobType": "code-generation", "projectId": "proj-1", "userId": "user-1"}


def test_deployment_goes_to_its_queue(queues):
    producer = JobProducer(queues=queues)

    producer.enqueue_deployment("dep-1", "user-1", "proj-1", "staging", {"replicas": 1})

    body, attributes = queues[JobType.DEPLOYMENT].sent[0]
    assert JobMessage.from_dict(body).payload().config == {"replicas": 1}
    assert attributes == {"jobType": "deployment", "projectId": "proj-1", "environment": "staging"}


def test_job_type_must_match_payload(queues):
    producer = JobProducer(queues=queues)
    from apps.shared.contracts.job_message import DeploymentPayload

    with pytest.raises(ValueError):
        producer.enqueue(JobType.CODE_GENERATION, DeploymentPayload("d", "u", "p", "production"))


def test_send_failure_propagates(queues):
    queues[JobType.CODE_GENERATION].send_error = QueueSendError("throttled")

    with pytest.raises(QueueSendError):
        JobProducer(queues=queues).enqueue_code_generation("cg-1", "user-1", "proj-1", "api", "x")


def test_submit_writes_record_before_enqueue(repo, notifier, queues):
    seen = []
    queue = queues[JobType.CODE_GENERATION]
    queue.on_send = lambda body: seen.append(repo.get(body["id"], body["data"]["owner_id"]))

    record = submit_code_generation(
        repo,
        JobProducer(queues=queues),
        owner_id="user-1",
        project_id="proj-1",
        prompt_type="full-stack",
        prompt="add a login form",
        notifier=notifier,
    )

    assert seen[0]["status"] == "queued"
    assert seen[0]["id"] == record["id"]
    assert repo.get(record["id"], "user-1")["generated_files"] == []
    assert notifier.event_types == ["queued"]


def test_submit_send_failure_leaves_record_queued(repo, notifier, queues):
    queues[JobType.DEPLOYMENT].send_error = QueueSendError("throttled")

    with pytest.raises(QueueSendError):
        submit_deployment(
            repo,
            JobProducer(queues=queues),
            owner_id="user-1",
            project_id="proj-1",
            environment="production",
            notifier=notifier,
        )

    (record,) = repo.records.values()
    assert record["status"] == "queued"
    assert notifier.events == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"prompt_type": "graphql", "prompt": "x"},
        {"prompt_type": "api", "prompt": "   "},
    ],
)
def test_submit_code_generation_validation(repo, queues, kwargs):
    with pytest.raises(ValueError):
        submit_code_generation(repo, JobProducer(queues=queues), owner_id="u", project_id="p", **kwargs)

    assert repo.records == {}


def test_submit_deployment_rejects_unknown_environment(repo, queues):
    with pytest.raises(ValueError):
        submit_deployment(repo, JobProducer(queues=queues), owner_id="u", project_id="p", environment="qa")

    assert queues[JobType.DEPLOYMENT].sent == []
