# This module contains a custom formatter for logging messages with different log levels.
import logging
from typing import Optional

ROOT_LOGGER_NAME = "chronicler"


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
        formatter = CustomFormatter()
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
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


def _root_logger() -> logging.Logger:
    """Return the application root logger, attaching the console handler once."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(getattr(h, "_chronicler_console", False) for h in root.handlers):
        ch = logging.StreamHandler()
        ch.setLevel(logging.DEBUG)
        ch.setFormatter(CustomFormatter())
        ch._chronicler_console = True
        root.addHandler(ch)
        root.setLevel(logging.INFO)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger that lives under the application root logger.

    Args:
        name: Usually the caller's __name__.

    Returns:
        logging.Logger: A child of the "chronicler" logger.
    """
    root = _root_logger()
    if not name:
        return root
    return root.getChild(name)


def setup_file_logging(log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Attach a plain-text file handler to the application logger and set its level.

    A file handler added by an earlier call is closed and replaced, so
    repeated calls never duplicate log lines.

    Args:
        log_file: Path of the log file to append to.
        level: Logging level for both console and file output.

    Returns:
        logging.Logger: The configured root application logger.
    """
    root = _root_logger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_chronicler_file", False):
            root.removeHandler(handler)
            handler.close()

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh._chronicler_file = True
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter('[%(levelname)s] %(asctime)s - %(name)s - %(message)s'))
    root.addHandler(fh)
    return root
