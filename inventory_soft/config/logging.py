"""
Logging Configuration for Inventory Soft

structlog events and stdlib records (uvicorn, SQLAlchemy) share one stdout
handler and one renderer: JSON lines by default, colored console output when
LOG_FORMAT is "text".
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from inventory_soft.config.settings import MonitoringSettings, get_settings

# Loggers that install their own handlers or are too chatty at DEBUG
_ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_QUIET_LOGGERS = ("aiosqlite",)


def _pre_chain() -> List:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str):
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    monitoring: Optional[MonitoringSettings] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Route structlog and stdlib logging through a single stdout handler.

    Args:
        monitoring: Logging settings; the cached environment settings when omitted
        log_level: Override the configured level (DEBUG, INFO, WARNING, ERROR)
    """
    monitoring = monitoring or get_settings().monitoring
    level_name = (log_level or monitoring.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=pre_chain + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ProcessorFormatter(
        processor=_renderer(monitoring.log_format),
        foreign_pre_chain=pre_chain,
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in _ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers = [handler]
        routed.propagate = False
        routed.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level_name,
        format=monitoring.log_format,
    )
