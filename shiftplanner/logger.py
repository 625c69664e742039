"""Logging setup and generation history log."""

import json
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from .models.optimization import GenerationStatistics

_HANDLER_MARK = "_shiftplanner_handler"


def configure_logging(level: str = "INFO", log_file: Optional[str] = "optimizer.log") -> None:
    """
    Configure structured logging.

    Calling this again replaces the handlers installed by a previous call
    instead of stacking duplicates.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (None or "" logs to console only)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARK, True)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)


class JSONLogger:
    """JSON-lines log of per-generation statistics for offline analysis."""

    def __init__(self, log_file: str = "generations.jsonl"):
        """
        Initialize JSON logger.

        Args:
            log_file: Path to JSON log file
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.file_handle = open(self.log_file, "a")

    def log_generation(self, stats: GenerationStatistics, run_id: Optional[str] = None) -> None:
        """
        Append one generation's statistics.

        Args:
            stats: Statistics of the generation's best individual
            run_id: Optional identifier of the run the generation belongs to
        """
        entry = stats.model_dump()
        if run_id is not None:
            entry["run_id"] = run_id
        json.dump(entry, self.file_handle)
        self.file_handle.write("\n")
        self.file_handle.flush()

    def close(self) -> None:
        """Close log file."""
        self.file_handle.close()
