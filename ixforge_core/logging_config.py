"""
Logging setup for the ixforge server.

Console output is either a coloured single line (``human``) or one JSON
object per line (``json``); an optional log file is always JSON.  The
API layer attaches ``endpoint`` and ``status`` to rejection records and
both formats carry them.  Keypair secrets and request bodies are never
passed to a logger.

Usage:
    from ixforge_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="logs/ixforge.log")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

_EXTRA_FIELDS = ("endpoint", "status")

_LEVEL_COLOURS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1;31m",
}
_RESET = "\033[0m"


def _extras(record: logging.LogRecord) -> dict:
    return {k: getattr(record, k) for k in _EXTRA_FIELDS if hasattr(record, k)}


class _JSONFormatter(logging.Formatter):
    """One JSON object per record, UTC timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class _HumanFormatter(logging.Formatter):
    """``HH:MM:SS [LEVEL] logger: message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        colour = _LEVEL_COLOURS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [
            f"{colour}{ts} [{record.levelname:<7}]{_RESET} {record.name}: {record.getMessage()}",
        ]
        parts.extend(f"{k}={v}" for k, v in _extras(record).items())
        line = " ".join(parts)
        if record.exc_info and record.exc_info[1]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> None:
    """Replace the root handlers with ixforge's console (and file) handlers.

    Unknown level names fall back to INFO.  aiohttp's access log is held
    at WARNING or above so each request does not produce a line.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_JSONFormatter() if fmt == "json" else _HumanFormatter())
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(path))
        file_handler.setFormatter(_JSONFormatter())
        root.addHandler(file_handler)

    logging.getLogger("aiohttp.access").setLevel(max(root.level, logging.WARNING))
