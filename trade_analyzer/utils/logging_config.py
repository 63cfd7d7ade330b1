"""Root logger setup for the trade analyzer CLI."""

import logging
import sys
from pathlib import Path
from typing import IO, Iterable, List, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LEVEL_NAMES = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

# HTTP client loggers used by the Sleeper fetcher
QUIET_LOGGERS = ('urllib3', 'requests')


def resolve_level(level: str) -> int:
    """Map a level name to its logging constant.

    Raises:
        ValueError: If the name is not one of LEVEL_NAMES
    """
    name = level.upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LEVEL_NAMES)}")
    return logging.getLevelName(name)


def build_handlers(log_level: int,
                   log_file: Optional[str] = None,
                   stream: Optional[IO[str]] = None) -> List[logging.Handler]:
    """Console handler plus an optional file handler, all sharing LOG_FORMAT.

    Console output goes to stderr so that command output on stdout stays
    machine readable.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO",
                  log_file: Optional[str] = None,
                  quiet_loggers: Iterable[str] = QUIET_LOGGERS) -> None:
    """Replace the root logger's handlers.

    Args:
        level: One of LEVEL_NAMES, case insensitive
        log_file: Optional file path to also log to
        quiet_loggers: Loggers held at WARNING unless ``level`` is stricter
    """
    log_level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    for handler in build_handlers(log_level, log_file):
        root_logger.addHandler(handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
    logging.getLogger(__name__).debug(f"Logging configured at {logging.getLevelName(log_level)}")
