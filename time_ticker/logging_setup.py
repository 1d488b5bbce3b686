import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict

LOG_FILE_NAME = "time_ticker.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# lowest level a logger (or its children) may show on the console
_CONSOLE_FLOORS: Dict[str, int] = {
    "time_ticker": logging.NOTSET,
    "qt": logging.WARNING,
}
_DEFAULT_FLOOR = logging.ERROR

# marks handlers installed here so a second call replaces only those
_OWNED = "_time_ticker_handler"


def console_floor(name: str) -> int:
    """Console threshold for logger ``name``; the longest configured prefix wins."""
    best, floor = -1, _DEFAULT_FLOOR
    for prefix, level in _CONSOLE_FLOORS.items():
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > best:
            best, floor = len(prefix), level
    return floor


class _ConsoleNoiseFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= console_floor(record.name)


def _own(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED, True)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/time_ticker",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """Install the filtered stderr handler and the rotating log file.

    Safe to call again: handlers from an earlier call are closed and replaced,
    anything else attached to the root logger is left alone. Returns the path
    of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(h)
        h.close()

    console = _own(logging.StreamHandler(sys.stderr))
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    # the tray runs for days; keep the file bounded
    file_handler = _own(
        logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    )
    file_handler.setLevel(file_level)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
