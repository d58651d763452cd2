from __future__ import annotations


class FinanceError(Exception):
    """Base class for finance summary errors."""


class DataShapeError(FinanceError, ValueError):
    """A raw backend record lacks a usable value for an expected field."""

    def __init__(self, field: str, value: object = None) -> None:
        self.field = field
        self.value = value
        super().__init__(f"field {field!r} has no usable value: {value!r}")


class FetchFailure(FinanceError):
    """One of the source fetches of a refresh failed; the refresh failed as a whole."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"{source} fetch failed: {message}")


class RefreshSuperseded(FinanceError):
    """A newer refresh was issued before this one completed; its result was discarded."""

    def __init__(self, latest: int) -> None:
        self.latest = latest
        super().__init__(f"refresh superseded by #{latest}")
