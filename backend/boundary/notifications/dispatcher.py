"""
Notification dispatcher.

Defines the delivery contract used by the application services and a
default implementation that renders the notice and writes it to the log.

Dependencies: logging (stdlib), backend.observability.log_utils
System role: Best-effort delivery of lifecycle notices
"""

import logging
from collections import deque
from typing import Any, Protocol
from uuid import UUID

from backend.boundary.notifications.events import (
    Notice,
    NotificationEvent,
    build_notice,
)
from backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Delivery contract for lifecycle notices."""

    async def notify(
        self,
        event_type: NotificationEvent | str,
        recipient_user_id: UUID,
        payload: dict[str, Any],
    ) -> None:
        """Deliver one notice to one user."""


class LoggingNotificationDispatcher:
    """Render notices and write them to the application log."""

    def __init__(self, enabled: bool = True, history: int = 100) -> None:
        self.enabled = enabled
        self.sent: deque[Notice] = deque(maxlen=history)

    async def notify(
        self,
        event_type: NotificationEvent | str,
        recipient_user_id: UUID,
        payload: dict[str, Any],
    ) -> None:
        if not self.enabled:
            return
        notice = build_notice(event_type, recipient_user_id, payload)
        self.sent.append(notice)
        logger.info(
            notice.title,
            extra={
                "event_type": notice.event_type.value,
                "recipient_user_id": str(recipient_user_id),
                "notice_message": notice.message,
            },
        )


async def dispatch_safely(
    dispatcher: NotificationDispatcher,
    event_type: NotificationEvent,
    recipient_user_id: UUID | None,
    payload: dict[str, Any],
) -> None:
    """
    Deliver a notice without letting delivery failures reach the caller.

    Notices are sent after the triggering transaction commits, so a failure
    here is logged with context and dropped.

    Args:
        dispatcher: Delivery implementation
        event_type: Lifecycle event
        recipient_user_id: Recipient; None skips delivery (open requests)
        payload: Template values
    """
    if recipient_user_id is None:
        return
    try:
        await dispatcher.notify(event_type, recipient_user_id, payload)
    except Exception as e:
        log_exception_with_context(
            logger,
            "Notification delivery failed",
            e,
            event_type=event_type,
            recipient_user_id=recipient_user_id,
        )
