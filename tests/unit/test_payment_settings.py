"""
Test suite for PaymentSettings.

System role: Verification of settlement configuration loading
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SettingsValidationError

from backend.configs import PaymentSettings


class TestCommissionRate:
    """Test suite for the commission_rate setting."""

    def test_commission_rate_should_load_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Arrange
        monkeypatch.setenv("PAYMENTS_COMMISSION_RATE", "12.50")

        # Act
        settings = PaymentSettings()

        # Assert
        assert settings.commission_rate == Decimal("12.50")

    @pytest.mark.parametrize("rate", ["12.345", "-1", "100.01"])
    def test_commission_rate_should_fit_stored_column(
        self, monkeypatch: pytest.MonkeyPatch, rate: str
    ) -> None:
        """Test rates the payments table cannot store exactly are refused at startup."""
        # Arrange
        monkeypatch.setenv("PAYMENTS_COMMISSION_RATE", rate)

        # Act & Assert
        with pytest.raises(SettingsValidationError):
            PaymentSettings()
