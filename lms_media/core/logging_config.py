# lms_media/core/logging_config.py
import logging
import sys
import structlog

from lms_media.core.settings import settings


def setup_logging() -> None:
    """
    Configure structlog + standaard logging.
    Logs gaan als JSON naar stdout; credentials komen nooit in een event.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Globale logger die je overal kunt importeren
logger = structlog.get_logger("lms_media")
