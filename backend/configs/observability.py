"""
Observability configuration settings.

Settings for logging and notification dispatch.

Dependencies: pydantic_settings
System role: Observability configuration for logging and notices
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ObservabilitySettings(BaseSettings):
    """Observability configuration for logging and notifications."""

    log_level: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    notifications_enabled: bool = Field(
        default=True,
        description="Dispatch lifecycle notices to users",
    )

    class Config:
        """Pydantic config for environment variable loading."""

        env_prefix = "OBSERVABILITY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
