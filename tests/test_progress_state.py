import pytest

from achievement_api.enums import ProgressStatus
from achievement_api.progress_state import ProgressTransitionError, resolve_progress

INPROGRESS = ProgressStatus.INPROGRESS
BLOCKED = ProgressStatus.BLOCKED
FINISHED = ProgressStatus.FINISHED


@pytest.mark.parametrize("step", [None, 0, 3, 100])
def test_zero_target_finishes_immediately(step):
    outcome = resolve_progress(0, requested_step=step)
    assert outcome.status == FINISHED
    assert outcome.current_step == (step or 0)


def test_unset_target_behaves_like_zero():
    assert resolve_progress(None, requested_step=4).status == FINISHED


@pytest.mark.parametrize("step, expected", [(0, INPROGRESS), (4, INPROGRESS), (5, FINISHED)])
def test_derivation_against_target(step, expected):
    outcome = resolve_progress(5, requested_step=step)
    assert outcome.status == expected
    assert outcome.current_step == step


def test_step_past_target_is_clamped():
    assert resolve_progress(5, requested_step=9) == (FINISHED, 5)


def test_inprogress_request_still_derives_finished():
    assert resolve_progress(5, INPROGRESS, 7) == (FINISHED, 5)


def test_explicit_finished_before_target_is_rejected():
    with pytest.raises(ProgressTransitionError) as exc_info:
        resolve_progress(5, FINISHED, 3)
    assert exc_info.value.current_step == 3
    assert exc_info.value.target == 5


def test_explicit_finished_uses_existing_step():
    with pytest.raises(ProgressTransitionError):
        resolve_progress(5, FINISHED, existing_status=INPROGRESS, existing_step=2)
    assert resolve_progress(5, FINISHED, existing_status=INPROGRESS, existing_step=6) == (FINISHED, 5)


def test_explicit_finished_allowed_on_zero_target():
    assert resolve_progress(0, FINISHED) == (FINISHED, 0)


def test_blocked_ignores_target_logic():
    assert resolve_progress(5, BLOCKED, 9) == (BLOCKED, 9)
    assert resolve_progress(0, BLOCKED) == (BLOCKED, 0)


def test_blocked_is_sticky_until_status_is_requested():
    assert resolve_progress(5, None, 7, existing_status=BLOCKED, existing_step=2) == (BLOCKED, 7)
    assert resolve_progress(5, INPROGRESS, 3, existing_status=BLOCKED, existing_step=2) == (INPROGRESS, 3)


def test_update_keeps_existing_step_when_omitted():
    assert resolve_progress(5, None, None, existing_status=INPROGRESS, existing_step=3) == (INPROGRESS, 3)


def test_switching_to_a_smaller_target_rederives():
    # the caller passes the new achievement's target
    assert resolve_progress(2, None, None, existing_status=INPROGRESS, existing_step=3) == (FINISHED, 2)


def test_target_scenario():
    created = resolve_progress(5, requested_step=3)
    assert created == (INPROGRESS, 3)
    reached = resolve_progress(5, requested_step=5, existing_status=created.status, existing_step=created.current_step)
    assert reached == (FINISHED, 5)
    overshoot = resolve_progress(5, requested_step=9, existing_status=reached.status, existing_step=reached.current_step)
    assert overshoot == (FINISHED, 5)
