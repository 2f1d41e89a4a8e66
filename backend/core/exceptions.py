"""
Exception hierarchy for the home-services marketplace.

Provides layered exception structure for booking and settlement errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class MarketplaceError(Exception):
    """Base exception for all marketplace domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(MarketplaceError):
    """Raised when input is malformed or a required field is missing."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class AuthorizationError(MarketplaceError):
    """Raised when the actor has no rights over the target entity."""

    def __init__(
        self,
        message: str = "Not authorized",
        actor_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if actor_id:
            details["actor_id"] = actor_id
        super().__init__(message, details)


class NotFoundError(MarketplaceError):
    """
    Raised when an entity is missing or does not belong to the actor.

    Both cases share this error so callers cannot probe for ids that
    exist but belong to someone else.
    """

    def __init__(
        self,
        resource: str,
        resource_id: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Entity kind (job, payment, maid, review)
            resource_id: ID that was looked up
            message: Optional override of the default message
            details: Additional context
        """
        details = details or {}
        details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(message or f"{resource.capitalize()} not found", details)


class PreconditionError(MarketplaceError):
    """Raised when actor and entity are valid but the lifecycle state is wrong."""

    def __init__(
        self,
        message: str,
        current_status: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if current_status:
            details["current_status"] = current_status
        self.current_status = current_status
        super().__init__(message, details)


class ConflictError(MarketplaceError):
    """Raised when the operation is already satisfied or lost a concurrent race."""

    pass
