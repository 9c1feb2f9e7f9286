"""Crash reporting for fatal simulation errors.

A crash banner goes to stderr and a JSON line to the crash file. When a
status provider is installed, the last known simulation status is stored
with the record so an aborted run can be replayed from its seed.
"""

import json
import os
import sys
import traceback

from utils.ids import format_timestamp, generate_ksuid

# Overridden by configure()
_crash_log = "logs/crash.log"
_status_provider = None


def configure(crash_file, status_provider=None):
    """Set crash log path and an optional callable returning run status."""
    global _crash_log, _status_provider
    _crash_log = crash_file
    _status_provider = status_provider


def _current_status():
    if _status_provider is None:
        return None
    try:
        return str(_status_provider())
    except Exception:
        return None


def _write_crash(record):
    """Append record to the crash file. Never raises."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
    except Exception:
        pass


def _build_record(exc_name, exc_msg, tb, context=None):
    record = {
        "id": generate_ksuid(),
        "timestamp": format_timestamp(),
        "type": exc_name,
        "msg": exc_msg,
        "traceback": tb,
    }
    status = _current_status()
    if status:
        record["status"] = status
    if context:
        record["context"] = context
    return record


def log_crash(exc_type, exc_value, exc_tb):
    """Log sync crash to stderr and file. Never raises."""
    exc_name = exc_type.__name__ if exc_type else "Unknown"
    exc_msg = str(exc_value) if exc_value else ""
    tb = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    context = getattr(exc_value, "context", None)
    record = _build_record(exc_name, exc_msg, tb, context)

    sys.stderr.write(f"\n{'=' * 60}\nCRASH [{record['id']}] {record['timestamp']}\n{'=' * 60}\n")
    sys.stderr.write(f"{exc_name}: {exc_msg}\n")
    if "status" in record:
        sys.stderr.write(f"status: {record['status']}\n")
    sys.stderr.write(f"{'-' * 60}\n{tb}{'=' * 60}\n\n")
    _write_crash(record)
    return record


def log_async_crash(exc, context_dict, logger=None):
    """Log a crash raised inside an event loop task. Never raises."""
    exc_name = type(exc).__name__ if exc else "AsyncError"
    exc_msg = str(exc) if exc else context_dict.get("message", "Unknown")
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) if exc else None

    if logger:
        logger.error("Async exception", error=exc_msg, task=str(context_dict.get("future", "unknown")))

    record = _build_record(exc_name, exc_msg, tb, {"loop": str(context_dict.get("message", ""))})
    _write_crash(record)
    return record


def create_async_handler(logger=None):
    """Create async exception handler for event loop."""
    def handler(loop, context):
        log_async_crash(context.get("exception"), context, logger)
    return handler


def install_crash_handler():
    """Install global sync exception handler."""
    sys.excepthook = log_crash
