"""Console logging for vault-deck."""

import logging
import sys

from vault_deck.config import settings


class ColoredFormatter(logging.Formatter):
    """Colour the level name with ANSI escape codes."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{self.BOLD}{levelname}{self.RESET}"
            )

        result = super().format(record)

        record.levelname = levelname

        return result


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once per process.

    Uses ``LOG_LEVEL`` from the app settings unless *level* is given.
    At DEBUG the ``urllib3`` connection chatter is kept at WARNING.
    """
    log_level = (level or settings()["LOG_LEVEL"]).upper()
    numeric = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    logging.basicConfig(level=numeric, handlers=[handler], force=True)

    if log_level == "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)
