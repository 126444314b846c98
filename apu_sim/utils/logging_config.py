"""
Logging configuration for the APU surrogate.

Library modules log through ``logging.getLogger(__name__)`` and therefore
sit under the ``apu_sim`` logger. ``setup_logging`` attaches handlers to
that logger only, so hosts embedding the surrogate keep control of the
root logger.
"""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


PACKAGE_LOGGER = 'apu_sim'


class DeterministicFormatter(logging.Formatter):
    """Fixed-width ``time | level | logger | message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        return f"{timestamp} | {record.levelname:<8} | {record.name:<28} | {record.getMessage()}"


def setup_logging(
    log_dir: Optional[Path] = None,
    level: Union[int, str] = logging.INFO,
    console: bool = True,
) -> logging.Logger:
    """Attach handlers to the ``apu_sim`` logger.

    Calling this again replaces the handlers from the previous call.

    Args:
        log_dir: Directory for a timestamped log file (no file if None)
        level: Logging level, numeric or name (e.g. "DEBUG")
        console: Also log to stdout

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"apu_sim_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    formatter = DeterministicFormatter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    return package_logger


class LogContext:
    """Logs the start, end and wall-clock duration of a simulation operation.

    Usage:
        with LogContext(logger, "apu_run", duration=200.0):
            ...

    An exception raised inside the block is logged as ``FAIL`` and
    propagates unchanged.
    """

    def __init__(self, logger: logging.Logger, operation: str, **context):
        self._logger = logger
        self._operation = operation
        self._context = context
        self._start: Optional[float] = None
        self.elapsed_ms: Optional[float] = None

    def __enter__(self) -> 'LogContext':
        self._start = time.perf_counter()
        details = "".join(f" | {key}={value}" for key, value in self._context.items())
        self._logger.info(f"START | {self._operation}{details}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        if exc_type is None:
            self._logger.info(f"END   | {self._operation} | elapsed={self.elapsed_ms:.2f}ms")
        else:
            self._logger.error(
                f"FAIL  | {self._operation} | {exc_type.__name__}: {exc_val} "
                f"| elapsed={self.elapsed_ms:.2f}ms"
            )
        return False
