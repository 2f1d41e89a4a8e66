"""
Earnings API endpoints.

Routes:
- GET /earnings/maid - Payout summary of the calling maid
- GET /earnings/homeowner - Spending summary of the calling homeowner
- GET /earnings/homeowner/pending - Completed jobs awaiting payment
- GET /earnings/admin - Platform payment statistics

Dependencies: backend.application.services, backend.models
System role: Reporting HTTP API
"""

from fastapi import APIRouter, Depends, Query

from backend.api.deps.dependencies import get_earnings_service, require_roles
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.earnings_service import EarningsService
from backend.models.actor import Actor, UserRole
from backend.models.earnings import (
    AdminPaymentStats,
    EarningsRange,
    HomeownerSpendingSummary,
    MaidEarningsSummary,
    PendingPayment,
)

router = APIRouter(prefix="/earnings", tags=["earnings"])


@router.get("/maid", response_model=MaidEarningsSummary)
@handle_domain_errors
async def maid_earnings(
    range: EarningsRange = Query(EarningsRange.ALL, description="all, month or week"),
    actor: Actor = Depends(require_roles(UserRole.MAID)),
    earnings_service: EarningsService = Depends(get_earnings_service),
) -> MaidEarningsSummary:
    """Earned and pending payouts of the calling maid."""
    return await earnings_service.maid_summary(actor.id, range)


@router.get("/homeowner", response_model=HomeownerSpendingSummary)
@handle_domain_errors
async def homeowner_spending(
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER)),
    earnings_service: EarningsService = Depends(get_earnings_service),
) -> HomeownerSpendingSummary:
    """Paid and pending totals of the calling homeowner."""
    return await earnings_service.homeowner_summary(actor.id)


@router.get("/homeowner/pending", response_model=list[PendingPayment])
@handle_domain_errors
async def homeowner_pending(
    actor: Actor = Depends(require_roles(UserRole.HOMEOWNER)),
    earnings_service: EarningsService = Depends(get_earnings_service),
) -> list[PendingPayment]:
    """Completed jobs still awaiting payment."""
    return await earnings_service.pending_payments(actor.id)


@router.get("/admin", response_model=AdminPaymentStats)
@handle_domain_errors
async def admin_stats(
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
    earnings_service: EarningsService = Depends(get_earnings_service),
) -> AdminPaymentStats:
    """Platform-wide payment statistics."""
    return await earnings_service.admin_stats()
