"""Structured logging for languagecenter.

Events are snake_case names with keyword context, e.g.
``logger.warning("strings_refresh_failed", locale="da", platform="web")``.
Outside production they render as console lines, in production as JSON.
Under pytest nothing is emitted.
"""

import inspect
import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from languagecenter.core.config import Settings, get_settings

SILENT = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def resolve_log_level(name: str) -> int:
    """Map a LOG_LEVEL name to a stdlib level, defaulting to INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def build_processors(settings: Settings) -> List[Any]:
    """Processor chain for the given settings.

    Args:
        settings: Application settings; ``is_production`` picks the renderer.

    Returns:
        structlog processors ending with a console or JSON renderer.
    """
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if settings.is_production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    return processors


def configure_logging(settings: Optional[Settings] = None) -> BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Settings to read LOG_LEVEL and PREFIX from (default: the
            process settings).

    Returns:
        The root structlog logger.
    """
    if _is_test_environment():
        logging.root.setLevel(SILENT)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=SILENT, force=True)
        return structlog.stdlib.get_logger()

    settings = settings or get_settings()

    structlog.configure(
        processors=build_processors(settings),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s", level=resolve_log_level(settings.LOG_LEVEL)
    )

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger(**context: Any) -> BoundLogger:
    """Logger bound to the calling module.

    Binds ``component`` (last dotted segment) and ``module_path`` (full
    module name) plus any extra context given.
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module_name = caller.f_globals.get("__name__") if caller is not None else None

    if not module_name:
        return logger.bind(component="unknown", **context)

    return logger.bind(
        component=module_name.rsplit(".", 1)[-1], module_path=module_name, **context
    )
