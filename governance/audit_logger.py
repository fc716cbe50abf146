"""Structured JSONL audit logger for contact mutations."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


class AuditLogger:
    """Writes one JSON line per contact book mutation event."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("cb.audit")

    def log(self, event: str, payload: dict[str, Any], outcome: str = "success") -> None:
        """Append one JSONL audit event."""
        record = {
            "timestamp": datetime.now(UTC).isoformat(),
            "event": event,
            "record_id": payload.get("record_id"),
            "name": payload.get("name"),
            "outcome": outcome,
        }
        extra = {k: v for k, v in payload.items() if k not in {"record_id", "name"}}
        if extra:
            record["details"] = extra
        line = json.dumps(record, ensure_ascii=True, default=str)
        try:
            with self.log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            self.logger.warning("Unable to write audit log %s: %s", self.log_path, exc)
        self.logger.info(line)

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        self.log(event, payload)

    def read_events(self) -> list[dict[str, Any]]:
        """Return all recorded events, oldest first."""
        if not self.log_path.exists():
            return []
        with self.log_path.open("r", encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]
