"""
Logging bootstrap for headless runs.

Simulation modules log structured events (`tick`, `lineage_extinct`,
`snapshot_saved`, ...) through `structlog.get_logger(__name__)`. This
module routes those events into stdlib logging, one logger per module,
rendered either for a terminal or as one JSON object per line for
collecting long runs.

USAGE:
    from minions.logging_setup import configure_logging

    configure_logging("DEBUG")                  # colour console
    configure_logging("INFO", json_logs=True)   # machine-readable
"""

import logging
from typing import Any, List

import structlog


_configured = False


def _renderer(json_logs: bool) -> List[Any]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer(sort_keys=True)]
    return [structlog.dev.ConsoleRenderer()]


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route simulation events to stdlib logging. Later calls are ignored.

    Args:
        level: Level name; unknown names fall back to INFO
        json_logs: Render JSON lines instead of console output
    """
    global _configured
    if _configured:
        return

    log_level = logging.getLevelName(str(level or "INFO").upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(level=log_level, format="%(message)s")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *_renderer(json_logs),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True
