from __future__ import annotations

import logging
import sys

import structlog


def get_logger(operation: str | None = None, **context) -> structlog.BoundLogger:
    """
    Logger do structlog. Com `operation`, cada evento leva a chave
    `operation` (ex.: "aggregate", "resolve_clients") e o contexto extra,
    para que os avisos de dados sujos saiam atrelados à chamada que os gerou.
    """
    logger = structlog.get_logger()
    if operation is None:
        return logger.bind(**context) if context else logger
    return logger.bind(operation=operation, **context)


def configure_logging(json: bool = True, level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO), stream=sys.stdout
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        cache_logger_on_first_use=True,
    )

