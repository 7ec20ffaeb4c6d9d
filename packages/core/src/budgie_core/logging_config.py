"""structlog setup for Budgie.

Modules log through ``structlog.get_logger()`` and never configure logging
themselves; the application calls ``configure_logging`` once at start-up.
"""

import logging
from typing import Optional

import structlog

from .config import BudgieConfig


def configure_logging(config: Optional[BudgieConfig] = None) -> None:
    """Configure structlog level filtering and rendering.

    Args:
        config: Settings to apply; loaded from the environment if omitted
    """
    config = config or BudgieConfig()
    level = logging.getLevelName(config.log_level)

    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
    structlog.get_logger().debug(
        "logging_configured",
        env=config.env,
        level=config.log_level,
        format=config.log_format,
    )


__all__ = ["configure_logging"]
