"""Flat comma-delimited file persistence for the record store."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path

from book.errors import PersistenceWarning
from book.schemas import ContactSnapshot

logger = logging.getLogger("cb.persistence")


def parse_line(line: str) -> tuple[str, str, str]:
    """Split on the first two commas; missing trailing fields come back empty."""
    parts = line.split(",", 2)
    parts.extend([""] * (3 - len(parts)))
    return parts[0], parts[1], parts[2]


class FlatFileStore:
    """Reads and rewrites the whole contacts file, one record per line."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def save(self, records: Iterable[ContactSnapshot]) -> None:
        """Replace the file with ``records`` in order.

        Writes a sibling temp file first and renames it into place, so a crash
        mid-write never leaves a truncated contacts file behind.
        """
        lines = [record.to_line() for record in records]
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp", text=True
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                for line in lines:
                    fh.write(line + "\n")
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceWarning(f"Unable to save contacts to {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Saved %d contacts to %s", len(lines), self.path)

    def _target_mode(self) -> int:
        """Mode the saved file should end up with; mkstemp alone gives 0600."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def load(self) -> list[tuple[str, str, str]]:
        """Return parsed lines in file order."""
        if not self.path.exists():
            raise PersistenceWarning(f"Contacts file not found: {self.path}. Starting empty.")
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                return [parse_line(line.rstrip("\n")) for line in fh]
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceWarning(f"Unable to read contacts from {self.path}: {exc}") from exc
