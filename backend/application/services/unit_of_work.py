"""
Transaction scope for service operations.

Commits on success. On failure the session is rolled back and the error is
logged before it propagates: domain errors at WARNING, anything else with
its traceback.

Dependencies: sqlalchemy, backend.core.exceptions, backend.observability.log_utils
System role: Commit/rollback boundary shared by all services
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from backend.core.exceptions import MarketplaceError
from backend.observability.log_utils import log_exception_with_context, log_with_context


@asynccontextmanager
async def unit_of_work(
    db: AsyncSession,
    logger: logging.Logger,
    operation: str,
    **context,
) -> AsyncIterator[AsyncSession]:
    """
    Run one service operation inside a single transaction.

    Args:
        db: Async database session
        logger: Calling service's logger
        operation: Human-readable operation name for log messages
        **context: Identifiers attached to failure logs

    Yields:
        AsyncSession: The same session, for convenience
    """
    try:
        yield db
        await db.commit()
    except MarketplaceError as e:
        await db.rollback()
        log_with_context(
            logger,
            logging.WARNING,
            f"{operation} rejected",
            error_type=type(e).__name__,
            error=e.message,
            **context,
        )
        raise
    except Exception as e:
        await db.rollback()
        log_exception_with_context(logger, f"{operation} failed", e, **context)
        raise
