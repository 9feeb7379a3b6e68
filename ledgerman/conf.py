"""
Ledgerman configuration.

Usage in settings.py:
    LEDGERMAN = {
        "CASHBOOK_BRIDGE": "cashbook.adapters.LedgermanCashbookBridge",
        "MAX_APPLY_ATTEMPTS": 3,
        "CASHBOOK_CURRENCY": "CNY",
        "FX_RATE_KRW": "180",
        "DEFAULT_PAGE_SIZE": 50,
        "MAX_PAGE_SIZE": 200,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LedgermanSettings:
    """Ledgerman configuration settings."""

    # Cashbook bridge backend (dotted path, empty = noop)
    CASHBOOK_BRIDGE: str = ""

    # Optimistic concurrency: attempts before ConcurrencyExhaustedError
    MAX_APPLY_ATTEMPTS: int = 3

    # Currency of product costs and the KRW rate used for cashbook entries
    CASHBOOK_CURRENCY: str = "CNY"
    FX_RATE_KRW: str = "180"

    # Movement history pagination
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 200


def get_ledgerman_settings() -> LedgermanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LEDGERMAN", {})
    return LedgermanSettings(**{
        k: v for k, v in user_settings.items()
        if k in LedgermanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ledgerman_settings(), name)


ledgerman_settings = _LazySettings()
