# hintrating/core/logging/json_logger.py
from __future__ import annotations

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from hintrating.core.logging.icons import get_event_icon

# Keys shown as an "assignment/request" locator on the console
_LOCATOR_KEYS = ("assignment_id", "request_id")


class JSONLineFormatter(logging.Formatter):
    """One JSON object per rating event: timestamp, run id, event type and payload."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "run_id": getattr(record, "run_id", None),
            "level": record.levelname,
            "event_type": getattr(record, "event_type", record.levelname.lower()),
            "data": getattr(record, "data", None) or {},
        }
        message = record.getMessage()
        if message:
            entry["message"] = message
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """`ICON Event a1/r1 key=value ...` lines for watching a rating run."""

    width = 120

    def format(self, record: logging.LogRecord) -> str:
        event_type = getattr(record, "event_type", record.levelname.lower())
        data = dict(getattr(record, "data", None) or {})
        parts = [get_event_icon(event_type), event_type]

        locator = [str(data.pop(key)) for key in _LOCATOR_KEYS if key in data]
        if locator:
            parts.append("/".join(locator))
        message = record.getMessage()
        if message:
            parts.append(message)
        parts.extend(f"{key}={value}" for key, value in data.items())

        line = " ".join(parts)
        if len(line) > self.width:
            line = line[: self.width - 3] + "..."
        return line


class JSONLogger:
    """
    Structured event log for rating runs.

    Every event is tagged with the run id and written both to the console
    and to a rotating JSONL file, so a run can be inspected afterwards with
    `get_logs_by_type`. `bind()` returns a view that adds fixed context
    (e.g. the algorithm being rated) to each event it logs.
    """

    def __init__(
        self,
        log_path: str = "logs/hintrating.jsonl",
        *,
        run_id: Optional[str] = None,
        level: int = logging.INFO,
        rotate_bytes: int = 10_000_000,
        rotate_backups: int = 5,
        logger_name: str = "hintrating.events",
        enable_console: bool = True,
        enable_jsonl: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.log_path = Path(log_path)
        self.run_id = run_id or uuid.uuid4().hex[:12]
        self.context: Dict[str, Any] = dict(context or {})
        self._rotate_backups = rotate_backups

        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Another logger with this name already writes here: share its handlers
        if self._logger.handlers and self._file_handler_path() == (
                Path(os.path.abspath(self.log_path)) if enable_jsonl else None):
            return
        self.close()

        if enable_console:
            console = logging.StreamHandler()
            console.setLevel(level)
            console.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console)
        if enable_jsonl:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            jsonl = RotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=rotate_bytes,
                backupCount=rotate_backups,
                encoding="utf-8",
            )
            jsonl.setLevel(level)
            jsonl.setFormatter(JSONLineFormatter())
            self._logger.addHandler(jsonl)

    def _file_handler_path(self) -> Optional[Path]:
        for handler in self._logger.handlers:
            if isinstance(handler, RotatingFileHandler):
                return Path(handler.baseFilename)
        return None

    def bind(self, **context) -> "JSONLogger":
        """A view of this log that merges `context` into every event's data."""
        view = object.__new__(JSONLogger)
        view.log_path = self.log_path
        view.run_id = self.run_id
        view.context = {**self.context, **context}
        view._rotate_backups = self._rotate_backups
        view._logger = self._logger
        return view

    def _emit(self, level: int, event_type: str, message: str, data: Optional[dict],
              exc_info: bool = False):
        payload = {**self.context, **(data or {})}
        self._logger.log(level, message, exc_info=exc_info, extra={
            "event_type": event_type,
            "run_id": self.run_id,
            "data": payload,
        })

    def log(self, event_type: str, data: Optional[dict] = None):
        """Record a rating event, e.g. `log("RequestRated", {...})`. Empty events are dropped."""
        if not data:
            return
        self._emit(logging.INFO, event_type, "", data)

    def info(self, message: str, extra: Optional[dict] = None):
        self._emit(logging.INFO, "info", message, extra)

    def warning(self, message: str, extra: Optional[dict] = None):
        self._emit(logging.WARNING, "warning", message, extra)

    def exception(self, message: str, extra: Optional[dict] = None):
        self._emit(logging.ERROR, "exception", message, extra, exc_info=True)

    def close(self):
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)

    def _log_files(self) -> Iterator[Path]:
        # Oldest rotated file first, the live file last
        for i in range(self._rotate_backups, 0, -1):
            backup = self.log_path.with_name(f"{self.log_path.name}.{i}")
            if backup.exists():
                yield backup
        if self.log_path.exists():
            yield self.log_path

    def get_all_logs(self) -> List[dict]:
        """Every event of this run, across rotated files, in write order."""
        for handler in self._logger.handlers:
            handler.flush()
        entries: List[dict] = []
        for path in self._log_files():
            with path.open("r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    entry = json.loads(line)
                    if entry.get("run_id") == self.run_id:
                        entries.append(entry)
        return entries

    def get_logs_by_type(self, event_type: str) -> List[dict]:
        return [entry for entry in self.get_all_logs() if entry.get("event_type") == event_type]
