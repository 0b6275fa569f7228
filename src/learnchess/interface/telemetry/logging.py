from __future__ import annotations

from typing import Any
import logging
import sys
import structlog

from src.learnchess.infrastructure.config import AppConfig


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = "INFO", *, json_output: bool = True) -> None:
    """Configure structlog over stdlib logging.

    Production emits one JSON object per line; development and test runs use
    the console renderer.
    """
    min_level = _resolve_level(level)
    logging.basicConfig(format="%(message)s", level=min_level, stream=sys.stdout)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_config(config: AppConfig) -> None:
    setup_logging(
        config.additional.get("STRUCTLOG_LEVEL", "INFO"),
        json_output=config.flask_env == "production",
    )


def get_logger(name: str | None = None):
    """Return a structlog logger bound to the provided name."""
    return structlog.get_logger(name or "learnchess")


def bind_trace(logger: Any, trace_id: str | None = None, **kwargs) -> Any:
    """Attach trace metadata to a logger for request correlation."""
    context = {"trace_id": trace_id} if trace_id else {}
    context.update(kwargs)
    return logger.bind(**context)


__all__ = ["bind_trace", "get_logger", "setup_logging", "setup_logging_from_config"]
