"""Logging setup for trusted-auth.

The reconciliation engine runs on every request, so its debug trace (cache
hits, profile synchronization, group deltas) stays muted unless
``ENABLE_AUTH_LOGGING`` is set or the whole process runs at DEBUG.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class LogVerbosity(str, Enum):
    """Verbosity modes accepted in ``LOG_VERBOSITY``."""
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    """Output formats accepted in ``LOG_FORMAT``."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

_FORMATS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}

_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingConfig:
    """Builds and applies the ``dictConfig`` for the package."""

    # Per-request reconciliation trace
    AUTH_MODULES = [
        "trusted_auth.features.auth",
        "trusted_auth.features.users",
    ]

    # HTTP client noise from TestClient and friends
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
    ]

    @staticmethod
    def resolve_level(environ: Mapping[str, str]) -> str:
        """Root level from ``LOG_VERBOSITY`` (or ``LOG_LEVEL``), WARNING when unknown."""
        requested = environ.get("LOG_VERBOSITY", environ.get("LOG_LEVEL", "NORMAL")).upper()
        if requested in _LEVEL_NAMES:
            return requested
        try:
            return _VERBOSITY_LEVELS[LogVerbosity(requested)]
        except ValueError:
            return "WARNING"

    @staticmethod
    def resolve_format(environ: Mapping[str, str]) -> str:
        try:
            return _FORMATS[LogFormat(environ.get("LOG_FORMAT", "simple").lower())]
        except ValueError:
            return _FORMATS[LogFormat.SIMPLE]

    @classmethod
    def build(cls, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Return the ``dictConfig`` mapping for the given environment."""
        environ = os.environ if environ is None else environ
        level = cls.resolve_level(environ)
        auth_logging = environ.get("ENABLE_AUTH_LOGGING", "false").lower() == "true"
        auth_level = "DEBUG" if auth_logging or level == "DEBUG" else "WARNING"

        loggers: Dict[str, Dict[str, Any]] = {
            module: {"level": "ERROR", "handlers": ["console"], "propagate": False}
            for module in cls.ERROR_ONLY_MODULES
        }
        # Still propagate to the root handler, only the threshold differs
        loggers.update({module: {"level": auth_level} for module in cls.AUTH_MODULES})

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": cls.resolve_format(environ),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls, environ: Optional[Mapping[str, str]] = None) -> None:
        config = cls.build(environ)
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(
            f"Logging configured: level={config['root']['level']}, "
            f"auth modules={config['loggers'][cls.AUTH_MODULES[0]]['level']}"
        )


def setup_logging() -> None:
    """Configure logging from the process environment; runs on package import."""
    LoggingConfig.configure()
