"""
Payment configuration settings.

Platform commission, currency and duration fallbacks used when settling
bookings, plus reporting window sizes for earnings summaries.

Dependencies: pydantic, pydantic_settings
System role: Settlement and reporting configuration
"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class PaymentSettings(BaseSettings):
    """Commission and settlement configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAYMENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    commission_rate: Decimal = Field(
        default=Decimal("15"),
        ge=0,
        le=100,
        decimal_places=2,
        description="Platform commission percentage captured on each new payment",
    )
    currency: str = Field(default="USD", description="ISO currency code for payments")
    fallback_duration_hours: float = Field(
        default=4.0,
        gt=0,
        description="Billable hours when a job has neither actual nor estimated duration",
    )
    mark_awaiting_payment_on_completion: bool = Field(
        default=False,
        description="Advance job payment_status to awaiting_payment when work completes",
    )
    monthly_periods: int = Field(
        default=6,
        ge=1,
        description="Number of calendar months kept in earnings breakdowns",
    )
