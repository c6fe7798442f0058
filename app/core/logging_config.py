# app/core/logging_config.py
import logging
import logging.config

from app.core.config import settings


def setup_logging(level: str = None) -> None:
    """Configure root and uvicorn loggers for the application."""
    level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
                "sqlalchemy.engine": {
                    "level": "INFO" if settings.DB_ECHO else "WARNING"
                },
            },
        }
    )
