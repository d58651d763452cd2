from __future__ import annotations

import logging
import os

from rich.logging import RichHandler


def configure_logging(level: str | None = None) -> None:
    """Install a Rich console handler on the root logger.

    The level comes from the argument or the ``LOG_LEVEL`` environment
    variable (defaults to ``INFO``).
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
