import pytest

from tests.fakes import InMemoryBlobStorage, InMemoryJobRepository, RecordingNotifier


@pytest.fixture
def repo():
    return InMemoryJobRepository()


@pytest.fixture
def notifier(repo):
    return RecordingNotifier(repo)


@pytest.fixture
def storage():
    return InMemoryBlobStorage()
