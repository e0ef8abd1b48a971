import contextvars
import logging
import uuid
from configparser import RawConfigParser
from contextlib import contextmanager
from logging import Logger
from logging import config as logging_config
from typing import TYPE_CHECKING, Iterator, List, Optional

from debinstall import config

if TYPE_CHECKING:
    from logging import LogRecord

# Default logging configuration
DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "root": {"level": "INFO", "handlers": ["consoleHandler"]},
    "loggers": {
        "debinstall": {
            "level": "INFO",
        },
    },
    "handlers": {
        "consoleHandler": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "formatter",
            "stream": "ext://sys.stdout",
        }
    },
    "formatters": {
        "formatter": {
            "format": "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
}

try:
    logging_config.dictConfig(DEFAULT_LOGGING_CONFIG)
except KeyError:
    logging.basicConfig(format="%(asctime)s %(name)-12s %(levelname)-8s %(message)s", level=logging.DEBUG)


attempt_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("attempt_id")

# Set once the logging component configuration has been applied
_configured = False


@contextmanager
def attempt() -> Iterator[str]:
    """
    Binds a new installation attempt identifier to the records logged inside the block.

    Yields:
        str: The attempt identifier, also available as ``%(attemptid)s`` in formats.
    """
    token = attempt_id_var.set(uuid.uuid4().hex[:8])
    try:
        yield attempt_id_var.get()
    finally:
        attempt_id_var.reset(token)


def annotate_logger(logger: Logger) -> None:
    """
    Adds an attempt ID filter to all handlers of the specified logger.

    Args:
        logger (Logger): The logger instance to annotate.
    """
    attempt_id_filter = AttemptIDFilter()

    for handler in logger.handlers:
        if not any(isinstance(f, AttemptIDFilter) for f in handler.filters):
            handler.addFilter(attempt_id_filter)


def _all_loggers() -> List[Logger]:
    return [logging.getLogger()] + [
        logger for logger in logging.Logger.manager.loggerDict.values() if isinstance(logger, logging.Logger)
    ]


def apply_logging_config(raw_config: RawConfigParser) -> None:
    """
    Applies a logging configuration in the ``logging.config.fileConfig`` format.

    Loggers not named in the configuration are left enabled. If the
    configuration is invalid, every logger gets back its previous handlers,
    level and propagation before the error is raised.
    """
    saved = [(logger, list(logger.handlers), logger.level, logger.propagate) for logger in _all_loggers()]

    try:
        logging_config.fileConfig(raw_config, disable_existing_loggers=False)
    except Exception:
        for logger, handlers, level, propagate in saved:
            logger.handlers = handlers
            logger.setLevel(level)
            logger.propagate = propagate
        raise

    for logger in _all_loggers():
        annotate_logger(logger)


def _safe_get_config() -> Optional[RawConfigParser]:
    try:
        return config.get_config("logging")
    except Exception:
        return None


def init_logging(loggername: str) -> Logger:
    """
    Returns the ``debinstall.<loggername>`` logger.

    The first call applies the "logging" component configuration, when one is
    installed.
    """
    global _configured

    logger = logging.getLogger(f"debinstall.{loggername}")

    if not _configured:
        _configured = True
        component_config = _safe_get_config()

        if component_config and component_config.has_section("loggers"):
            try:
                apply_logging_config(component_config)
            except Exception as e:
                logger.error("Logging configuration error: %s", e)

        annotate_logger(logging.getLogger())

    return logger


class AttemptIDFilter(logging.Filter):
    """
    A logging filter that adds the installation attempt ID to log records.

    Attributes:
        attemptid (str): The raw attempt ID.
        attemptidf (str): The formatted attempt ID for inclusion in log messages.
    """

    def filter(self, record: "LogRecord") -> bool:
        attemptid = attempt_id_var.get("")

        record.attemptid = attemptid
        record.attemptidf = f"(attempt={attemptid})" if attemptid else ""

        return True
