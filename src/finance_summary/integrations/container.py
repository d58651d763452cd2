from __future__ import annotations

from dataclasses import dataclass

from finance_summary.integrations.http_source import HttpFinanceSource
from finance_summary.services.finance_service import FinanceService
from finance_summary.services.ports import FinanceSource
from finance_summary.services.refresh_service import SummaryRefresher
from finance_summary.settings import FinanceSettings, load_settings


@dataclass
class AppContainer:
    """Runtime dependency container for API/CLI/service wiring."""

    settings: FinanceSettings
    source: FinanceSource
    refresher: SummaryRefresher
    service: FinanceService


def build_container(
    settings: FinanceSettings | None = None,
    *,
    source: FinanceSource | None = None,
) -> AppContainer:
    """Create the default runtime container backed by the marketplace REST API."""

    settings = settings or load_settings()
    source = source or HttpFinanceSource(settings.api_url, timeout=settings.api_timeout)
    refresher = SummaryRefresher(source)
    service = FinanceService(refresher, currency=settings.currency)
    return AppContainer(
        settings=settings,
        source=source,
        refresher=refresher,
        service=service,
    )
