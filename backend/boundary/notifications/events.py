"""
Notification event catalog.

Maps each lifecycle event to the title and message shown to its
recipient. Templates use str.format placeholders filled from the payload.

Dependencies: None
System role: User-facing notice rendering for lifecycle events
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID


class NotificationEvent(str, Enum):
    """Lifecycle events that produce a notice."""

    JOB_REQUEST = "job_request"
    JOB_ACCEPTED = "job_accepted"
    JOB_DECLINED = "job_declined"
    JOB_STARTED = "job_started"
    JOB_COMPLETED = "job_completed"
    JOB_CANCELLED = "job_cancelled"
    JOB_PROGRESS = "job_progress"
    PAYMENT_RECEIVED = "payment_received"
    NEW_REVIEW = "new_review"


@dataclass(frozen=True)
class NoticeTemplate:
    """Title and message templates plus the payload keys they need."""

    title: str
    message: str
    required_keys: frozenset[str] = frozenset({"job_id", "job_title"})


@dataclass(frozen=True)
class Notice:
    """Rendered notice ready for delivery."""

    event_type: NotificationEvent
    recipient_user_id: UUID
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)


NOTICE_TEMPLATES: dict[NotificationEvent, NoticeTemplate] = {
    NotificationEvent.JOB_REQUEST: NoticeTemplate(
        title="New Job Request",
        message='A homeowner has requested your service for "{job_title}"',
    ),
    NotificationEvent.JOB_ACCEPTED: NoticeTemplate(
        title="Job Accepted",
        message='Your booking for "{job_title}" has been accepted',
    ),
    NotificationEvent.JOB_DECLINED: NoticeTemplate(
        title="Job Declined",
        message='Your booking for "{job_title}" was declined. Please book another maid.',
    ),
    NotificationEvent.JOB_STARTED: NoticeTemplate(
        title="Maid Has Arrived",
        message='Your maid has checked in and started working on "{job_title}"',
    ),
    NotificationEvent.JOB_COMPLETED: NoticeTemplate(
        title="Job Completed",
        message='"{job_title}" has been completed. Please leave a review!',
    ),
    NotificationEvent.JOB_CANCELLED: NoticeTemplate(
        title="Booking Cancelled",
        message='The booking "{job_title}" has been cancelled by the {cancelled_by}',
        required_keys=frozenset({"job_id", "job_title", "cancelled_by"}),
    ),
    NotificationEvent.JOB_PROGRESS: NoticeTemplate(
        title="Job Progress Update",
        message="{job_title} is now {progress_percentage}% complete",
        required_keys=frozenset({"job_id", "job_title", "progress_percentage"}),
    ),
    NotificationEvent.PAYMENT_RECEIVED: NoticeTemplate(
        title="Payment Received",
        message='You received ${amount} for "{job_title}"',
        required_keys=frozenset({"job_id", "job_title", "amount"}),
    ),
    NotificationEvent.NEW_REVIEW: NoticeTemplate(
        title="New Review Received",
        message='You received a {rating}-star review for "{job_title}"',
        required_keys=frozenset({"job_id", "job_title", "rating"}),
    ),
}


def build_notice(
    event_type: NotificationEvent | str,
    recipient_user_id: UUID,
    payload: dict[str, Any],
) -> Notice:
    """
    Render the notice for an event.

    Args:
        event_type: Event enum member or its string value
        recipient_user_id: User receiving the notice
        payload: Template values; also carried as the notice data

    Returns:
        Notice: Rendered notice

    Raises:
        ValueError: If the event is unknown or payload keys are missing
    """
    event = NotificationEvent(event_type)
    template = NOTICE_TEMPLATES[event]
    missing = sorted(template.required_keys - set(payload))
    if missing:
        raise ValueError(
            f"Missing payload keys for notice '{event.value}': {', '.join(missing)}"
        )
    values = {key: str(value) for key, value in payload.items()}
    return Notice(
        event_type=event,
        recipient_user_id=recipient_user_id,
        title=template.title.format(**values),
        message=template.message.format(**values),
        data=dict(payload),
    )
