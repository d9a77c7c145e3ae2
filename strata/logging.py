from __future__ import annotations

import logging.config
import threading
from abc import ABC, abstractmethod
from typing import Any, cast

from strata.protocols.logging import LoggerProtocol

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggerProxy:
    """
    Stands in for the backend logger until `setup_logging` binds one.
    The first attribute access on an unbound proxy binds the logger from
    the active settings.
    """

    def __init__(self) -> None:
        self._logger: LoggerProtocol | None = None
        self._lock = threading.RLock()

    def bind_logger(self, logger: LoggerProtocol | None) -> None:  # noqa
        with self._lock:
            self._logger = logger

    def __getattr__(self, item: str) -> Any:
        with self._lock:
            if self._logger is None:
                setup_logging()
            return getattr(self._logger, item)


logger: LoggerProtocol = cast(LoggerProtocol, LoggerProxy())


class LoggingConfig(ABC):
    """
    Plugs a logging backend into `strata.logging.logger`.

    Routers only emit `debug` records (layer registration and handler
    invocation), so any object exposing the usual level methods works.
    """

    def __init__(self, level: str = "DEBUG", **kwargs: Any) -> None:
        assert isinstance(level, str) and level.upper() in LEVELS, (
            f"'{level}' is not a valid logging level. Available levels: '{', '.join(LEVELS)}'."
        )
        self.level = level.upper()
        self.options = kwargs
        self.skip_setup_configure: bool = kwargs.get("skip_setup_configure", False)

    def configure(self) -> None:
        raise NotImplementedError("`configure()` must be implemented in subclasses.")

    @abstractmethod
    def get_logger(self) -> Any:
        raise NotImplementedError("`get_logger()` must be implemented in subclasses.")


class StandardLoggingConfig(LoggingConfig):
    """
    Sends the `strata` logger of the standard library to stderr. Other
    loggers, the root one included, are left alone.
    """

    def __init__(self, config: dict[str, Any] | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.config = config or {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "strata": {"format": "[%(asctime)s] %(levelname)s %(name)s: %(message)s"},
            },
            "handlers": {
                "strata": {"class": "logging.StreamHandler", "formatter": "strata"},
            },
            "loggers": {
                "strata": {"level": self.level, "handlers": ["strata"], "propagate": False},
            },
        }

    def configure(self) -> None:
        logging.config.dictConfig(self.config)

    def get_logger(self) -> Any:
        return logging.getLogger("strata")


def setup_logging(logging_config: LoggingConfig | None = None) -> None:
    """
    Binds the logger of `logging_config`, or of `settings.logging_config`
    when none is given, to `strata.logging.logger`.

    Raises:
        ValueError: If `logging_config` is not a `LoggingConfig`.
    """
    if logging_config is not None and not isinstance(logging_config, LoggingConfig):
        raise ValueError("`logging_config` must be an instance of LoggingConfig.")

    if logging_config is None:
        from strata.conf import settings

        logging_config = settings.logging_config or StandardLoggingConfig()

    if not logging_config.skip_setup_configure:
        logging_config.configure()

    logger.bind_logger(logging_config.get_logger())
