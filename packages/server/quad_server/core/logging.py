"""structlog setup shared by the API server and the admin scripts."""

import logging
import sys

import structlog


def resolve_level(level: str) -> int:
    """Map a level name such as ``"info"`` to its numeric value."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return numeric


def configure_logging(level: str = "info", fmt: str = "json") -> None:
    """Send structlog and stdlib loggers (uvicorn among them) to stdout.

    ``fmt="json"`` emits one JSON object per line for the log shipper;
    ``"console"`` is for local runs and the scripts.
    """
    numeric_level = resolve_level(level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
    )
