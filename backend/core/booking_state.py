"""
Booking state machine.

Defines job and job-payment statuses, the allowed transition table, and
small pure helpers used by the lifecycle manager to build guarded updates.

Dependencies: None (pure domain layer)
System role: Single source of truth for booking lifecycle rules
"""

import enum
import math
from datetime import datetime, timezone
from typing import Any, Iterable


class JobStatus(str, enum.Enum):
    """
    Booking lifecycle states.

    REQUESTED: Homeowner asked for service, awaiting a maid's answer
    ACCEPTED: Maid agreed to the booking
    IN_PROGRESS: Maid checked in and work has started
    COMPLETED: Work finished (terminal)
    CANCELLED: Declined or cancelled before work started (terminal)
    """

    REQUESTED = "requested"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobPaymentStatus(str, enum.Enum):
    """Settlement progress tracked on the job itself."""

    NONE = "none"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"


ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.REQUESTED: frozenset({JobStatus.ACCEPTED, JobStatus.CANCELLED}),
    JobStatus.ACCEPTED: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})
CANCELLABLE_STATUSES = frozenset({JobStatus.REQUESTED, JobStatus.ACCEPTED})
TASK_EDITABLE_STATUSES = frozenset({JobStatus.ACCEPTED, JobStatus.IN_PROGRESS})
ACTIVE_STATUSES = frozenset(
    {JobStatus.REQUESTED, JobStatus.ACCEPTED, JobStatus.IN_PROGRESS}
)


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    """
    Check whether the state machine allows moving from current to target.

    Args:
        current: Status the job is in now
        target: Requested next status

    Returns:
        bool: True if the transition is part of the lifecycle
    """
    return target in ALLOWED_TRANSITIONS[current]


def sources_for(target: JobStatus) -> frozenset[JobStatus]:
    """
    Return every status from which target is reachable in one step.

    Used as the status guard of conditional updates.
    """
    return frozenset(
        status for status, targets in ALLOWED_TRANSITIONS.items() if target in targets
    )


def progress_percentage(tasks: Iterable[dict[str, Any]]) -> int:
    """
    Compute task completion as whole percent, rounded down.

    Args:
        tasks: Task entries with a boolean "completed" key

    Returns:
        int: 0-100; 0 when the job has no tasks
    """
    task_list = list(tasks)
    if not task_list:
        return 0
    done = sum(1 for task in task_list if task.get("completed"))
    return math.floor(done * 100 / len(task_list))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours between two instants, rounded to 2 decimals."""
    return round((as_utc(end) - as_utc(start)).total_seconds() / 3600, 2)
