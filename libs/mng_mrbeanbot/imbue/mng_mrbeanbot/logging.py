import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from typing import Final

from loguru import logger

from imbue.mng_mrbeanbot.primitives import LogLevel

_STDERR_FORMAT: Final[str] = "<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"


def setup_logging(level: LogLevel = LogLevel.INFO) -> None:
    """Replace loguru's default handler with a single stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=str(level), format=_STDERR_FORMAT)


@contextmanager
def log_span(message: str, *args: Any, **context: Any) -> Iterator[None]:
    """Log message at debug on entry, and again at trace with the outcome and elapsed time on exit.

    Keyword arguments are bound with logger.contextualize, so every message
    emitted inside the span carries them as extra fields. The exit message
    also carries `elapsed_seconds`.
    """
    with logger.contextualize(**context):
        logger.debug(message, *args)
        outcome = "failed"
        started_at = time.perf_counter()
        try:
            yield
            outcome = "done"
        finally:
            elapsed_seconds = time.perf_counter() - started_at
            logger.bind(elapsed_seconds=elapsed_seconds).trace(
                message + " ({}, {:.3f}s)", *args, outcome, elapsed_seconds
            )
