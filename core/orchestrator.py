"""Top-level application orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from book.contact_book import ContactBook
from book.history import HistoryPolicy
from book.schemas import LoadReport
from book.stores.flat_file_store import FlatFileStore
from core.event_bus import EventBus
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from governance.audit_logger import AuditLogger


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    book: ContactBook
    audit_logger: AuditLogger
    load_report: LoadReport


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, config_path: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.config_path = config_path

    def build(self, load: bool = True) -> RuntimeBundle:
        config = load_effective_config(self.root, self.config_path)
        paths = ensure_runtime_dirs(self.root, config)

        event_bus = EventBus()
        audit_logger = AuditLogger(paths["audit_log_path"])
        event_bus.subscribe_mutations(audit_logger)

        book = ContactBook(
            file_store=FlatFileStore(paths["contacts_file"]),
            history_policy=HistoryPolicy.from_config(config.get("history", {})),
            event_bus=event_bus,
            case_sensitive_sort=bool(config.get("sorting", {}).get("case_sensitive", True)),
        )
        load_report = book.load() if load else LoadReport()

        return RuntimeBundle(
            config=config,
            book=book,
            audit_logger=audit_logger,
            load_report=load_report,
        )

    @staticmethod
    def configure_logging(config: dict[str, Any]) -> None:
        level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
        logging.basicConfig(
            level=getattr(logging, level_name, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
