"""Structured logging setup (structlog on top of the stdlib logging levels)."""

import logging

import structlog

from vitals_risk.config import LogFormat, LoggingConfig


def configure_structlog(fmt: LogFormat = "json") -> None:
    """
    Route structlog events through stdlib logging.

    Levels and handlers stay with whoever owns the stdlib root logger, so an
    importing application decides what is emitted and where.
    """
    renderer: structlog.typing.Processor
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure structlog processors and the stdlib root level.

    JSON output for deployed environments, colored console output for local
    development.
    """
    config = config or LoggingConfig()
    logging.basicConfig(format="%(message)s", level=getattr(logging, config.level))
    logging.getLogger().setLevel(getattr(logging, config.level))
    configure_structlog(config.format)
