import logging
import sys
from typing import TextIO

LOGGER_NAME = "docconvert"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Log:
    """Process-wide logging facade for the conversion worker.

    Keyword arguments are passed through as ``extra`` record attributes.
    """

    _logger: logging.Logger = logging.getLogger(LOGGER_NAME)

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level and route records to ``stream`` (stdout by default).

        Calling it again adjusts the existing handler instead of adding one.
        """
        cls._logger.setLevel(log_level.upper())
        target = stream if stream is not None else sys.stdout
        for handler in cls._logger.handlers:
            if handler.get_name() == LOGGER_NAME and isinstance(handler, logging.StreamHandler):
                handler.setStream(target)
                return
        handler = logging.StreamHandler(target)
        handler.set_name(LOGGER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        cls._logger.addHandler(handler)

    @classmethod
    def _emit(cls, level: int, message: str, exc_info: bool, extra: dict[str, object]) -> None:
        cls._logger.log(level, message, exc_info=exc_info, extra=extra, stacklevel=3)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._emit(logging.INFO, message, False, kwargs)

    @classmethod
    def error(cls, message: str, exc_info: bool = False, **kwargs: object) -> None:
        """Log an error; pass exc_info=True from an except block to keep the traceback."""
        cls._emit(logging.ERROR, message, exc_info, kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._emit(logging.WARNING, message, False, kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._emit(logging.DEBUG, message, False, kwargs)
