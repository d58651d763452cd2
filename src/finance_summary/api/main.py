from __future__ import annotations

import os
from datetime import date

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from finance_summary.errors import FetchFailure, RefreshSuperseded
from finance_summary.integrations.container import AppContainer, build_container
from finance_summary.logging_utils import configure_logging
from finance_summary.models.api_requests import FilterLinesRequest
from finance_summary.models.api_responses import CurrencyResponse, LinesResponse, SummaryResponse
from finance_summary.models.common import ErrorInfo

container: AppContainer = build_container()

app = FastAPI(title="finance_summary API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if origin.strip()
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, code: str, message: str, **details: object) -> HTTPException:
    """Build an HTTPException whose detail is an ErrorInfo payload."""

    info = ErrorInfo(code=code, message=message, details=details or None)
    return HTTPException(status_code=status_code, detail=info.model_dump())


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Lightweight health endpoint for liveness checks."""

    return {"status": "ok"}


@app.get("/v1/finance/summary", response_model=SummaryResponse)
async def get_summary(start_date: date | None = None, end_date: date | None = None) -> SummaryResponse:
    """Refresh all three sources for a date range and return the reconciled summary."""

    try:
        snapshot = await container.service.get_snapshot(start_date, end_date)
    except FetchFailure as exc:
        raise _error(502, "FETCH_FAILED", str(exc), source=exc.source) from exc
    except RefreshSuperseded as exc:
        raise _error(409, "REFRESH_SUPERSEDED", str(exc), latest=exc.latest) from exc
    except ValueError as exc:
        raise _error(400, "INVALID_RANGE", str(exc)) from exc
    return SummaryResponse.from_snapshot(snapshot)


@app.get("/v1/finance/summary/current", response_model=SummaryResponse)
async def get_current_summary() -> SummaryResponse:
    """Return the most recently published summary without refetching."""

    snapshot = container.service.current_snapshot()
    if snapshot is None:
        raise _error(404, "NO_SUMMARY", "no summary has been published yet")
    return SummaryResponse.from_snapshot(snapshot)


@app.post("/v1/finance/lines/filter", response_model=LinesResponse)
async def filter_lines(req: FilterLinesRequest) -> LinesResponse:
    """Apply search, status, date-range and sort state to submitted lines."""

    items = container.service.filter_request(req)
    return LinesResponse(total=len(items), items=items)


@app.get("/v1/finance/format", response_model=CurrencyResponse)
async def format_amount(amount: float, locale: str = "en") -> CurrencyResponse:
    """Format an amount for display in the requested locale."""

    display = container.service.format_currency(amount, locale)
    return CurrencyResponse(
        amount=amount,
        locale=locale,
        formatted=str(display),
        number=display.number,
        currency=display.currency,
        currency_muted=display.currency_muted,
    )


def run() -> None:
    """Local API entrypoint used by script/console command."""

    import uvicorn

    configure_logging(container.settings.log_level)
    uvicorn.run(
        "finance_summary.api.main:app",
        host=container.settings.host,
        port=container.settings.port,
        reload=False,
    )


if __name__ == "__main__":
    run()
