from typing import NamedTuple, Optional

from achievement_api.enums import ProgressStatus


class ProgressOutcome(NamedTuple):
    status: ProgressStatus
    current_step: int


class ProgressTransitionError(ValueError):
    """Raised when FINISHED is requested before the target is reached."""

    def __init__(self, current_step: int, target: int):
        super().__init__("Cannot set progress to FINISHED when target is not reached")
        self.current_step = current_step
        self.target = target


def target_reached(target: Optional[int], step: int) -> bool:
    """A target of 0 (or unset) means completion is immediate."""
    return not target or step >= target


def clamp_step(target: Optional[int], step: int) -> int:
    if target and target > 0:
        return min(step, target)
    return step


def resolve_progress(
    target: Optional[int],
    requested_status: Optional[ProgressStatus] = None,
    requested_step: Optional[int] = None,
    existing_status: Optional[ProgressStatus] = None,
    existing_step: Optional[int] = None,
) -> ProgressOutcome:
    """
    Computes the status and step to store for a progress record.

    Parameters:
        target (Optional[int]): The achievement's target; 0 or None disables the step gate.
        requested_status (Optional[ProgressStatus]): Status sent by the caller, if any.
        requested_step (Optional[int]): Step sent by the caller, if any.
        existing_status (Optional[ProgressStatus]): Stored status, None on creation.
        existing_step (Optional[int]): Stored step, None on creation.

    Returns:
        ProgressOutcome: The final (status, current_step) pair.

    Raises:
        ProgressTransitionError: If FINISHED is requested and the target is not reached.
    """
    if requested_step is not None:
        step = requested_step
    elif existing_step is not None:
        step = existing_step
    else:
        step = 0

    # BLOCKED is an explicit override; the step is stored as is.
    if requested_status == ProgressStatus.BLOCKED:
        return ProgressOutcome(ProgressStatus.BLOCKED, step)
    if requested_status is None and existing_status == ProgressStatus.BLOCKED:
        return ProgressOutcome(ProgressStatus.BLOCKED, step)

    if requested_status == ProgressStatus.FINISHED and not target_reached(target, step):
        raise ProgressTransitionError(step, target)

    if target_reached(target, step):
        return ProgressOutcome(ProgressStatus.FINISHED, clamp_step(target, step))
    return ProgressOutcome(ProgressStatus.INPROGRESS, step)
