import logging
import sys

from favorites_cleanup.env import LOG_LEVEL

LOGGER_NAME = "favorites_cleanup"

_logger = None


class _ConsoleHandler(logging.StreamHandler):
    """StreamHandler that looks up sys.stdout / sys.stderr at emit time."""

    def __init__(self, name: str) -> None:
        self._stream_name = name
        super().__init__()

    @property
    def stream(self):
        return getattr(sys, self._stream_name)

    @stream.setter
    def stream(self, _value):
        pass


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def _configured_level(name: str):
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def get_logger(verbose: bool = False) -> logging.Logger:
    """Return the package logger, progress on stdout and problems on stderr.

    Module loggers created with ``logging.getLogger(__name__)`` inside the
    package are children of this one and share its handlers.
    """
    global _logger
    if _logger is None:
        _logger = logging.getLogger(LOGGER_NAME)
        if not _logger.handlers:
            formatter = logging.Formatter('[%(levelname)s] %(message)s')

            out = _ConsoleHandler("stdout")
            out.setFormatter(formatter)
            out.addFilter(_BelowWarning())
            _logger.addHandler(out)

            err = _ConsoleHandler("stderr")
            err.setFormatter(formatter)
            err.setLevel(logging.WARNING)
            _logger.addHandler(err)
        _logger.propagate = False
    level = _configured_level(LOG_LEVEL)
    _logger.setLevel(logging.DEBUG if verbose else level or logging.INFO)
    if level is None:
        _logger.warning(f"Unknown LOG_LEVEL {LOG_LEVEL!r}, using INFO")
    return _logger
