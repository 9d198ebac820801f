# src/config/logging_config.py

"""Per-run logging for pricewatch.

Every launch writes a dedicated file under ``logs/`` named after the
launch time (``logs/run_20261019_153045.log``).  All ``pricewatch.*``
loggers (orchestrator, aggregation, one per retailer) propagate into it,
so one aggregation cycle can be followed retailer by retailer.

The console only sees WARNING and above unless a different level is
requested, keeping stdout free for JSON output.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

LOGGER_NAME = "pricewatch"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    logs_dir: Path | None = None,
    console_level: int = logging.WARNING,
) -> Path:
    """Attach file and console handlers to the ``pricewatch`` logger.

    Args:
        logs_dir: Directory for the run log. Defaults to
            ``Settings.LOGS_DIR``.
        console_level: Minimum level echoed to stderr.

    Returns:
        The path of the log file for this run.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{stamp}.log"

    root_logger = logging.getLogger(LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Already configured in this process (tests, repeated CLI calls)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.debug("Run log opened at %s", log_file)
    return log_file
