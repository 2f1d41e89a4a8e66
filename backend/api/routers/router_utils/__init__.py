"""
Router utility functions.

Contains helpers shared by the API routers.
"""

from backend.api.routers.router_utils.error_handling import (
    handle_domain_errors,
    status_for,
)

__all__ = [
    "handle_domain_errors",
    "status_for",
]
