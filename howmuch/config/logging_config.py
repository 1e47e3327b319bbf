# howmuch/config/logging_config.py

"""Per-run logging for the howmuch CLI.

Every command writes ``logs/run_YYYYmmdd_HHMMSS.log`` at DEBUG, so a
store fallback or a failed scrape can be traced after the fact. The
console only shows ``Settings.CONSOLE_LOG_LEVEL`` and above (WARNING by
default) on stderr, leaving stdout to the JSON and table output.

HTTP client libraries used by the Supabase client log each request at
INFO; they are capped at WARNING so the run log stays readable.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from howmuch.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LIBRARIES = ("httpx", "httpcore", "hpack", "urllib3")


def _handler(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run-log file and stderr handlers to ``howmuch``.

    Safe to call more than once; later calls leave the existing
    handlers in place and only report the path a new run would use.

    Returns:
        The :class:`~pathlib.Path` of this run's log file.
    """
    run_dir = logs_dir or Settings.LOGS_DIR
    run_dir.mkdir(parents=True, exist_ok=True)
    log_file = run_dir / datetime.now().strftime("run_%Y%m%d_%H%M%S.log")

    app_logger = logging.getLogger("howmuch")
    app_logger.setLevel(logging.DEBUG)
    if app_logger.handlers:
        return log_file

    app_logger.addHandler(
        _handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FILE_FORMAT,
        )
    )
    app_logger.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr),
            logging.getLevelNamesMapping().get(
                Settings.CONSOLE_LOG_LEVEL, logging.WARNING
            ),
            _CONSOLE_FORMAT,
        )
    )
    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger.debug("Run log opened at %s", log_file)
    return log_file
