"""
Loggers for etell modules.

Every logger prints to stderr through Rich; stdout is left to the JSON that
`etell analyze` and `etell layout` emit. During `etell ingest` each logger also
appends to `ingest.log` in the working directory, one JSON object per line:

    {"timestamp": ..., "level": "WARNING", "logger": "etell.cli",
     "message": "Skipping walks/b.json: Session ... is already stored"}

so skipped and rejected session files can be reviewed after a batch import.
"""

import logging
import sys
import json
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# commands whose runs are mirrored to a JSON log file
FILE_LOG_COMMANDS = frozenset({"ingest"})


class JSONFormatter(logging.Formatter):
    """
    One `ingest.log` line per record; tracebacks go under "exception".
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level":     record.levelname,
            "logger":    record.name,
            "message":   record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def _current_command() -> str | None:
    return sys.argv[1] if len(sys.argv) > 1 else None


def get_logger(name: str, level: int | str = logging.INFO) -> logging.Logger:
    """
    Logger for an etell module, with handlers attached on first use.

    Parameters
    ----------
    name
        Module name, e.g. "etell.storage.dao".
    level
        Threshold for both the console and the `<command>.log` file.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

        command = _current_command()
        if command in FILE_LOG_COMMANDS:
            log_path = Path.cwd() / f"{command}.log"
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    return logger
