# This module contains a custom formatter for logging messages with different log levels.
import logging
from typing import Optional

class CustomFormatter(logging.Formatter):
    """
    A custom formatter for logging messages with different log levels.

    Attributes:
        grey (str): ANSI escape sequence for grey color.
        yellow (str): ANSI escape sequence for yellow color.
        red (str): ANSI escape sequence for red color.
        bold_red (str): ANSI escape sequence for bold red color.
        reset (str): ANSI escape sequence to reset color.
        format (str): The log message format.
        FORMATS (dict): A dictionary mapping log levels to their respective log message formats.

    Usage:
        logger = get_logger(__name__)
        logger.info("Feed loaded")
    """
    grey = "\x1b[37;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    dark_grey = "\x1b[30;1m"
    reset = "\x1b[0m"
    format = '[%(levelname)s] %(asctime)s - %(name)s - %(message)s'

    FORMATS = {
        logging.DEBUG: dark_grey + format + reset,
        logging.INFO: grey + format + reset,
        logging.WARNING: yellow + format + reset,
        logging.ERROR: red + format + reset,
        logging.CRITICAL: bold_red + format + reset
    }

    def format(self, record):
        """
        Formats the log record based on its log level.

        Args:
            record (logging.LogRecord): The log record to be formatted.

        Returns:
            str: The formatted log message.
        """
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


ROOT_LOGGER_NAME = "feedsync"

_console_handler: Optional[logging.Handler] = None


def _root() -> logging.Logger:
    global _console_handler
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setLevel(logging.DEBUG)
        _console_handler.setFormatter(CustomFormatter())
        root.addHandler(_console_handler)
        root.setLevel(logging.INFO)
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a child of the application logger.

    Args:
        name: Usually the calling module's ``__name__``.

    Returns:
        logging.Logger: Logger that writes through the coloured console handler.
    """
    _root()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_file_logging(log_file: str, level: int = logging.INFO) -> None:
    """
    Send application logs to a file in addition to the console.

    Args:
        log_file: Path of the log file to append to.
        level: Minimum level for both handlers.
    """
    root = _root()
    root.setLevel(level)

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter('[%(levelname)s] %(asctime)s - %(name)s - %(message)s'))
    root.addHandler(file_handler)
