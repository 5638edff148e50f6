"""
Logging Setup for the Multi-Dimensional Analytics Core

Library modules only ever call `structlog.get_logger(__name__)`; nothing is
emitted in a useful shape until the embedding process calls
`configure_logging()` once at startup:
- structlog events and plain stdlib records share one processor chain
- output is JSON, or colored console text when `log_format=text` or `debug`
- `app_name` and `app_env` are bound as context on every event
- an optional file handler mirrors stdout when `LOG_FILE` is set
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import ProcessorFormatter
from structlog.types import Processor

from multidim.config.settings import Settings, get_settings


def _pre_chain() -> List[Processor]:
    """Processors applied to structlog events and foreign stdlib records alike"""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(settings: Settings) -> Processor:
    if settings.debug or settings.monitoring.log_format == "text":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def _handlers(settings: Settings, formatter: logging.Formatter) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.monitoring.log_file:
        handlers.append(logging.FileHandler(settings.monitoring.log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def resolve_log_level(settings: Settings, override: Optional[str] = None) -> int:
    """Numeric level from the override, DEBUG when `debug` is on, else LOG_LEVEL"""
    if override:
        name = override
    elif settings.debug:
        name = "DEBUG"
    else:
        name = settings.monitoring.log_level
    level = getattr(logging, name.upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(log_level: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """
    Route structlog through the stdlib root logger.

    Safe to call more than once; earlier root handlers are replaced and the
    bound application context is reset.

    Args:
        log_level: Override level name (DEBUG, INFO, WARNING, ERROR)
        settings: Settings to configure from; cached settings when omitted
    """
    settings = settings or get_settings()
    level = resolve_log_level(settings, log_level)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=pre_chain + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = ProcessorFormatter(
        processors=[ProcessorFormatter.remove_processors_meta, _renderer(settings)],
        foreign_pre_chain=pre_chain,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in _handlers(settings, formatter):
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(app=settings.app_name, env=settings.app_env)

    structlog.get_logger(__name__).debug(
        "Logging configured",
        level=logging.getLevelName(level),
        log_file=settings.monitoring.log_file,
    )
