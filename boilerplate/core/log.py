"""
Logging setup

Console output plus a "daily" channel: one file per day under the
configured log directory, read back by the logs viewer.
"""
import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILENAME = "boilerplate.log"
DAILY_CHANNEL = "daily"


def get_daily_handler(root: logging.Logger = None):
    """Return the daily handler already attached to the root logger, if any."""
    root = root or logging.getLogger()
    for handler in root.handlers:
        if handler.get_name() == DAILY_CHANNEL:
            return handler
    return None


def setup_logging(config) -> logging.Logger:
    """
    Configure the root logger from app config.

    The daily channel is added in front of the existing handlers only
    when it is missing, so calling this twice is harmless.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.app.log_level.upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)
    # Timestamps in the configured timezone
    formatter.converter = lambda ts: datetime.fromtimestamp(ts, config.tz).timetuple()

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in root.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)

    if get_daily_handler(root) is None:
        log_dir = Path(config.app.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        daily = TimedRotatingFileHandler(
            log_dir / LOG_FILENAME,
            when="midnight",
            backupCount=config.app.log_days,
            utc=config.app.timezone == "UTC",
            encoding="utf-8",
        )
        daily.set_name(DAILY_CHANNEL)
        daily.setFormatter(formatter)
        root.handlers.insert(0, daily)
        logging.getLogger(__name__).info(f"Daily log channel enabled: {log_dir / LOG_FILENAME}")

    return root
