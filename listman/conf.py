"""
Listman configuration.

Usage in settings.py:
    LISTMAN = {
        "DEFAULT_SOURCE": "api",
        "MONTH_DAYS": 30,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class ListmanSettings:
    """Listman configuration settings."""

    # Source recorded on subscriptions when the caller gives none
    DEFAULT_SOURCE: str = "api"

    # Source recorded on the new subscription of a transfer
    TRANSFER_SOURCE: str = "transfer"

    # Source recorded on subscriptions opened by reconcile_set
    RECONCILE_SOURCE: str = "automation"

    # Primary key of the GlobalStats singleton
    STATS_KEY: str = "current"

    # Length of a "months" wait unit
    MONTH_DAYS: int = 30


def get_listman_settings() -> ListmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LISTMAN", {})
    return ListmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_listman_settings(), name)


listman_settings = _LazySettings()
