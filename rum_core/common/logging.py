import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from typing import Final

from loguru import logger

_LOG_FORMAT: Final[str] = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at the given level.

    stdout is reserved for assembled records (see the replay command), so every
    log line goes to stderr regardless of level.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=_LOG_FORMAT,
    )


@contextmanager
def log_span(message: str, *args: Any, **context: Any) -> Iterator[None]:
    """Log a debug message on entry and a trace message with the elapsed time on exit.

    Keyword arguments are bound with logger.contextualize so that every message
    emitted inside the span carries them as extra fields.
    """
    with logger.contextualize(**context):
        logger.debug(message, *args)
        start_time = time.monotonic()
        try:
            yield
        except BaseException:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [failed after {:.5f} sec]", *args, elapsed)
            raise
        else:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [done in {:.5f} sec]", *args, elapsed)
