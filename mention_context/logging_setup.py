"""
JSONL logging for the mention-context CLI.

Library modules only call ``logging.getLogger(__name__)``; the CLI installs
the file sink below when ``--log-file`` is given.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

DEFAULT_PATH = os.environ.get("MENTION_CONTEXT_LOG_PATH", "./mention-context.log.jsonl")
DEFAULT_LEVEL = os.environ.get("MENTION_CONTEXT_LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonlHandler(logging.Handler):
    """Appends one JSON object per record to ``path``."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        entry = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = logging.Formatter().formatException(record.exc_info)
        for key, value in vars(record).items():
            if key not in _STANDARD_ATTRS:
                entry.setdefault(key, value)
        return entry

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | None = None, level: str | None = None) -> JsonlHandler:
    """Route root logging to a JSONL file, replacing an earlier sink.

    Args:
        path: Log file; defaults to ``MENTION_CONTEXT_LOG_PATH``
        level: Level name; defaults to ``MENTION_CONTEXT_LOG_LEVEL`` or INFO

    Returns:
        The installed handler
    """
    level_name = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(logging.getLevelNamesMapping().get(level_name, logging.INFO))

    for existing in [h for h in root.handlers if isinstance(h, JsonlHandler)]:
        root.removeHandler(existing)
        existing.close()

    handler = JsonlHandler(path or DEFAULT_PATH)
    root.addHandler(handler)
    return handler
