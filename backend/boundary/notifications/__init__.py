"""
Notification boundary: delivery contract, notice catalog and default dispatcher.
"""

from backend.boundary.notifications.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    dispatch_safely,
)
from backend.boundary.notifications.events import (
    NOTICE_TEMPLATES,
    Notice,
    NotificationEvent,
    build_notice,
)

__all__ = [
    "LoggingNotificationDispatcher",
    "NOTICE_TEMPLATES",
    "Notice",
    "NotificationDispatcher",
    "NotificationEvent",
    "build_notice",
    "dispatch_safely",
]
