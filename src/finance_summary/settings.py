from __future__ import annotations

import os

from pydantic import Field

from finance_summary.models.common import StrictModel


class FinanceSettings(StrictModel):
    """Runtime configuration read from environment variables."""

    api_url: str = "http://127.0.0.1:3000"
    api_timeout: float = Field(default=10.0, gt=0)
    locale: str = "en"
    currency: str = Field(default="OMR", min_length=3, max_length=3)
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


def load_settings() -> FinanceSettings:
    """Build settings from ``FINANCE_*``, ``LOG_LEVEL``, ``HOST`` and ``PORT``."""

    return FinanceSettings(
        api_url=os.getenv("FINANCE_API_URL", "http://127.0.0.1:3000").rstrip("/"),
        api_timeout=float(os.getenv("FINANCE_API_TIMEOUT", "10")),
        locale=os.getenv("FINANCE_LOCALE", "en"),
        currency=os.getenv("FINANCE_CURRENCY", "OMR").upper(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
