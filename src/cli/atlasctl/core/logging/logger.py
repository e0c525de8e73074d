"""atlasctl logger."""

import logging
import time
from contextlib import contextmanager
from enum import Enum

from click import prompt, style

LOGGER_NAME = "atlasctl"


class LogLevel(Enum):
    """User-selectable log levels.

    Attributes
    ----------
    prefix : str
        Marker printed before each message of the level.
    color : str
        Click color of the marker.
    py_level : int
        Matching level of the `logging` module.
    """

    INFO = ("[i]  ", "cyan", logging.INFO)
    WARN = ("[w]  ", "yellow", logging.WARNING)
    ERROR = ("[e]  ", "red", logging.ERROR)
    DEBUG = ("[v]  ", "magenta", logging.DEBUG)

    def __init__(self, prefix: str, color: str, py_level: int):
        self.prefix = prefix
        self.color = color
        self.py_level = py_level

    @classmethod
    def for_record(cls, levelno: int) -> "LogLevel":
        """Return the level used to render a record of `levelno`."""
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


class AtlasLogger(logging.Logger):
    """Logger for CLI commands.

    Library modules log through plain `logging.getLogger(__name__)`
    children of this logger. The CLI-facing helpers live here.
    """

    def __init__(self, name: str, level: int = logging.NOTSET) -> None:
        super().__init__(name, level)
        self.log_level = LogLevel.INFO

    def warn(self, msg: object, *args: object, **kwargs) -> None:
        """Log a warning message."""
        kwargs.setdefault("stacklevel", 2)
        self.warning(msg, *args, **kwargs)

    def set_level(self, level: LogLevel) -> None:
        """Set the level of this logger and of the handlers it reaches."""
        self.log_level = level
        self.setLevel(level.py_level)
        for handler in self.handlers + logging.getLogger().handlers:
            if getattr(handler, "atlasctl", False):
                handler.setLevel(level.py_level)

    def prompt_msg(self, msg: str = "") -> str:
        """Prompt the user for input."""
        prefix = style(LogLevel.INFO.prefix, fg=LogLevel.INFO.color, bold=True)
        return prompt(f"{prefix}{msg}", type=str)

    @contextmanager
    def operation(self, message: str):
        """
        Log the start and duration of an API operation at debug level.

        Parameters
        ----------
        message : str
            Description of the operation, e.g. "Creating custom role".
        """
        self.debug(message, stacklevel=3)
        started = time.monotonic()
        yield
        self.debug(
            f"{message} done",
            stacklevel=3,
            extra={"elapsed": time.monotonic() - started},
        )


def configure_logging(log_level: LogLevel = LogLevel.INFO) -> AtlasLogger:
    """
    Create the atlasctl logger or return the existing one.

    The handler is attached to the root logger so records from
    `atlasctl.*` module loggers are formatted the same way.

    Parameters
    ----------
    log_level : LogLevel
        Minimum log level to emit.

    Returns
    -------
    AtlasLogger
        The configured atlasctl logger.
    """
    from atlasctl.core.logging.formatter import AtlasLogFormatter, AtlasLogHandler

    logger_class = logging.getLoggerClass()
    logging.setLoggerClass(AtlasLogger)
    try:
        logger = logging.getLogger(LOGGER_NAME)
    finally:
        logging.setLoggerClass(logger_class)

    if not isinstance(logger, AtlasLogger):
        raise TypeError(
            f"Logger '{LOGGER_NAME}' was created before logging was configured."
        )

    root_logger = logging.getLogger()
    if not any(getattr(h, "atlasctl", False) for h in root_logger.handlers):
        handler = AtlasLogHandler()
        handler.setFormatter(AtlasLogFormatter())
        root_logger.addHandler(handler)
        # urllib3 logs every connection at debug level
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger.set_level(log_level)
    return logger


def get_logger() -> AtlasLogger:
    """Return the atlasctl logger, configuring logging on first use."""
    logger = logging.Logger.manager.loggerDict.get(LOGGER_NAME)
    if isinstance(logger, AtlasLogger):
        return logger
    return configure_logging()
