import json
import logging
import logging.config
import sys

from core.config import configs


class JsonFormatter(logging.Formatter):
    """
    Formatter for logging in JSON format.
    """

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def _loggers(handler: str, app_level: str) -> dict:
    return {
        # Root Logger: Catches everything not caught by specific loggers
        "root": {
            "level": configs.LOG_LEVEL,
            "handlers": [handler],
        },
        # Engine + service loggers
        "tripscan": {
            "level": app_level,
            "handlers": [handler],
            "propagate": False,
        },
        "core": {
            "level": app_level,
            "handlers": [handler],
            "propagate": False,
        },
        # Uvicorn (FastAPI Server) Loggers
        "uvicorn": {
            "level": "INFO",
            "handlers": [handler],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": [handler],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": [handler],
            "propagate": False,
        },
        # External Libraries Noise Reduction
        "httpx": {
            "level": "WARNING",
            "handlers": [handler],
            "propagate": False,
        },
        "httpcore": {
            "level": "WARNING",
            "handlers": [handler],
            "propagate": False,
        },
    }


# -----------------------------------------------------------------------------
# Development Logging Configuration
# -----------------------------------------------------------------------------
# Console-friendly, readable text format.
DEV_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "default",
        },
    },
    "loggers": _loggers("console", "DEBUG" if configs.TRIP_CLUSTERING_DEBUG else "INFO"),
}

# -----------------------------------------------------------------------------
# Production Logging Configuration
# -----------------------------------------------------------------------------
# JSON structured, machine-parsable, suitable for aggregation (ELK, CloudWatch, etc.)
PROD_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": JsonFormatter,
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    },
    "handlers": {
        "console_json": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "json",
        },
    },
    "loggers": _loggers("console_json", configs.LOG_LEVEL),
}


def setup_logging():
    """
    Set up logging configuration based on the environment.
    """
    env = configs.ENVIRONMENT.lower()

    if env == "production":
        log_config = PROD_LOGGING_CONFIG
    else:
        log_config = DEV_LOGGING_CONFIG

    # Apply configuration
    logging.config.dictConfig(log_config)

    logger = logging.getLogger("core")
    logger.info(f"Logging setup complete for {env} environment with level {configs.LOG_LEVEL}")
