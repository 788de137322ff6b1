"""Loguru setup shared by every command."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
    '<level>{level: <8}</level> | '
    '<cyan>{extra[component]}</cyan> | '
    '<level>{message}</level>'
)
FILE_FORMAT = '{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {message}'

FILE_ROTATION = '10 MB'
FILE_RETENTION = '30 days'
FILE_COMPRESSION = 'gz'


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Route log records to stderr and, optionally, a rotated file.

    Calling it again replaces the previous sinks.

    Args:
        level: Minimum level written to every sink
        log_file: Path of the log file; its directory is created if needed
        log_format: Console format overriding ``CONSOLE_FORMAT``
    """
    logger.remove()
    # Records logged without a bound component still render
    logger.configure(extra={'component': 'gitport'})

    logger.add(
        sys.stderr,
        format=log_format or CONSOLE_FORMAT,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if not log_file:
        logger.debug(f'Console logging at {level}')
        return

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        format=FILE_FORMAT,
        level=level,
        rotation=FILE_ROTATION,
        retention=FILE_RETENTION,
        compression=FILE_COMPRESSION,
        backtrace=True,
        diagnose=False,
    )
    logger.debug(f'Logging at {level} to console and {log_file}')
