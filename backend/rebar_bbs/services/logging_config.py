"""Structured logging configuration for BBS hosts (CLI, services embedding the engine)."""
import json
import logging
import sys
from datetime import datetime, timezone

# Per-row engines that are chatty at DEBUG
_ROW_LOGGERS = ["rebar-bbs-cutting", "rebar-bbs-shapes"]


class JSONFormatter(logging.Formatter):
    """JSON structured log formatter, one object per line."""
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "bar_mark"):
            log_entry["bar_mark"] = record.bar_mark
        if hasattr(record, "duration_ms"):
            log_entry["duration_ms"] = record.duration_ms
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = True, stream=None, row_detail: bool = False):
    """Configure root logging. Logs go to stderr so stdout stays free for results."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
        ))

    root.handlers = [handler]

    for name in _ROW_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if row_detail else max(root.level, logging.INFO))
