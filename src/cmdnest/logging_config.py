"""Logging configuration for cmdnest.

Provides JSON or text logging, selected by ``CMDNEST_LOG_FORMAT`` or
``--log-format``. Every handler writes to stderr: stdout is reserved for
command output and completion candidates.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "cmdnest: %(levelname)s %(name)s: %(message)s"


def _build_json_formatter() -> logging.Formatter:
    fields = ["asctime", "levelname", "name", "message", "funcName", "lineno", "process"]
    fmt = " ".join([f"%({f})s" for f in fields])
    return jsonlogger.JsonFormatter(fmt=fmt, rename_fields={"levelname": "level", "name": "logger"})


def parse_level(level: str) -> int:
    """Map a level name or number to a logging level, WARNING when unknown."""
    if level.isdigit():
        return int(level)
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: str = "WARNING", fmt: str = "text") -> None:
    root = logging.getLogger()
    root.setLevel(parse_level(level))

    # Remove default handlers to avoid duplicate logs
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    if fmt.lower() == "json":
        handler.setFormatter(_build_json_formatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT))
    root.addHandler(handler)
