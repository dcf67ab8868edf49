"""Package-local structured logging utilities.

All components obtain loggers through this module so that structlog is
configured in one place. Components accept an optional injected logger and
bind their own component name onto it.
"""

import logging
import sys
from typing import Any, Optional

import structlog


def configure_logging(debug: bool = False, json: bool = True) -> None:
    """Configure structlog for command-line and workflow runs.

    Args:
        debug: Emit debug-level events when True
        json: Render events as JSON lines (default) or as console text
    """
    level = logging.DEBUG if debug else logging.INFO
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer()
    )
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
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_component_logger(component: str, logger: Optional[Any] = None) -> Any:
    """Get logger bound to a component name.

    Args:
        component: Component name (e.g., "SafetyClassifier", "StepBoundedLoop")
        logger: Optional injected logger. If None, uses default structlog logger.

    Returns:
        Logger bound to the component name
    """
    base = logger or structlog.get_logger()
    return base.bind(component=component)


def get_logger() -> Any:
    """Get default structured logger."""
    return structlog.get_logger()


__all__ = ["configure_logging", "get_component_logger", "get_logger"]
