"""
Dependency injection container.

Factory functions for FastAPI dependencies: caller identity, role checks
and per-request services.

Dependencies: backend.configs, backend.application, backend.boundary
System role: DI container for service injection
"""

from functools import lru_cache
from typing import Callable
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services import (
    BookingService,
    EarningsService,
    PaymentService,
    ReviewService,
)
from backend.boundary.db import get_async_db
from backend.boundary.notifications import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
)
from backend.configs import Settings, get_settings
from backend.models.actor import Actor, UserRole


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    """
    Get the process-wide notification dispatcher.

    Returns:
        NotificationDispatcher: Logging dispatcher, muted when notifications are disabled
    """
    settings = get_settings()
    return LoggingNotificationDispatcher(
        enabled=settings.observability.notifications_enabled
    )


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor:
    """
    Resolve the caller from headers set by the upstream auth layer.

    Args:
        x_user_id: Authenticated user UUID
        x_user_role: homeowner, maid or admin

    Returns:
        Actor: Caller identity

    Raises:
        HTTPException(401): Missing or malformed identity headers
    """
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    try:
        return Actor(id=UUID(x_user_id), role=UserRole(x_user_role.lower()))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid caller identity",
        )


def require_roles(*roles: UserRole) -> Callable[..., Actor]:
    """
    Build a dependency that admits only the given roles.

    Usage:
        @router.post("/{job_id}/accept")
        async def accept(actor: Actor = Depends(require_roles(UserRole.MAID))): ...
    """
    allowed = frozenset(roles)

    def dependency(actor: Actor = Depends(get_actor)) -> Actor:
        if actor.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Role not permitted for this operation",
            )
        return actor

    return dependency


def get_booking_service(
    db: AsyncSession = Depends(get_async_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Async database session (injected via Depends)
        dispatcher: Notification dispatcher (injected via Depends)

    Returns:
        BookingService: Booking service instance
    """
    return BookingService(db=db, dispatcher=dispatcher)


def get_payment_service(
    db: AsyncSession = Depends(get_async_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> PaymentService:
    """Get payment service instance."""
    return PaymentService(db=db, dispatcher=dispatcher)


def get_earnings_service(db: AsyncSession = Depends(get_async_db)) -> EarningsService:
    """Get earnings service instance."""
    return EarningsService(db=db)


def get_review_service(
    db: AsyncSession = Depends(get_async_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> ReviewService:
    """Get review service instance."""
    return ReviewService(db=db, dispatcher=dispatcher)
