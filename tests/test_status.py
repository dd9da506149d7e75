import pytest

from src.application.jobs.errors import InvalidTransitionError
from src.application.jobs.status import (
    JobStatus,
    JobType,
    can_transition,
    ensure_transition,
    is_terminal,
)

CG = JobType.CODE_GENERATION
DEP = JobType.DEPLOYMENT


@pytest.mark.parametrize(
    "job_type,current,target",
    [
        (CG, "queued", "generating"),
        (CG, "generating", "generating"),
        (CG, "generating", "completed"),
        (CG, "generating", "failed"),
        (DEP, "queued", "deploying"),
        (DEP, "deploying", "success"),
        (DEP, "deploying", "failed"),
    ],
)
def test_allowed_transitions(job_type, current, target):
    assert can_transition(job_type, current, target)


@pytest.mark.parametrize(
    "job_type,current,target",
    [
        (CG, "completed", "failed"),
        (CG, "failed", "generating"),
        (CG, "generating", "queued"),
        (CG, "queued", "completed"),
        (CG, "queued", "deploying"),
        (DEP, "success", "deploying"),
        (DEP, "deploying", "completed"),
        (DEP, "queued", "unknown"),
    ],
)
def test_rejected_transitions(job_type, current, target):
    assert not can_transition(job_type, current, target)


def test_ensure_transition_reports_plain_values():
    with pytest.raises(InvalidTransitionError) as exc:
        ensure_transition(CG, "cg-1", JobStatus.COMPLETED, JobStatus.FAILED)

    assert exc.value.current == "completed"
    assert exc.value.target == "failed"
    assert "completed -> failed" in str(exc.value)


def test_terminal_statuses():
    assert is_terminal("completed")
    assert is_terminal("success")
    assert is_terminal("failed")
    assert not is_terminal("queued")
    assert not is_terminal("generating")
    assert not is_terminal("bogus")
