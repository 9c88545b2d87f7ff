"""
structlog configuration for the trip booking API.

Every record, ours or from third-party stdlib loggers, goes through the same
processor chain and one stdout handler. The request middleware binds the
request id; the auth gateway binds the caller once the token is resolved.
"""

import logging
import sys
import structlog
from structlog.types import Processor

from app.core.config import Settings, get_settings

NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
}


def _shared_processors(settings: Settings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.ENVIRONMENT == "production":
        processors.append(structlog.processors.dict_tracebacks)
    return processors


def _renderer(settings: Settings) -> Processor:
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.DEBUG)


def setup_logging() -> None:
    settings = get_settings()
    shared = _shared_processors(settings)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
        )
    )

    # Replace rather than append; uvicorn reload calls this more than once
    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def bind_caller(user_public_id: str, role: str) -> None:
    """Attach the authenticated caller to every later log line of this request."""
    structlog.contextvars.bind_contextvars(user=user_public_id, role=role)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
