"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_actor,
    get_booking_service,
    get_earnings_service,
    get_notification_dispatcher,
    get_payment_service,
    get_review_service,
    get_settings_dependency,
    require_roles,
)

__all__ = [
    "get_actor",
    "get_booking_service",
    "get_earnings_service",
    "get_notification_dispatcher",
    "get_payment_service",
    "get_review_service",
    "get_settings_dependency",
    "require_roles",
]
