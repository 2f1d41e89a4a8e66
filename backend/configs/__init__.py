"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from backend.configs.payments import PaymentSettings
from backend.configs.settings import Settings, get_settings

__all__ = ["PaymentSettings", "Settings", "get_settings"]
