"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "contacts_file": "data/contacts.txt",
        "audit_log_path": "logs/audit.jsonl",
    },
    "history": {
        "update_undo_mode": "retract",
        "undoable_deletes": False,
        "clear_redo_on_mutation": False,
    },
    "sorting": {"case_sensitive": True},
    "logging": {"level": "WARNING"},
}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Ensure data and log directories exist and return resolved paths."""
    paths_cfg = config.get("paths", {})
    contacts_file = (root / paths_cfg.get("contacts_file", "data/contacts.txt")).resolve()
    audit_log_path = (root / paths_cfg.get("audit_log_path", "logs/audit.jsonl")).resolve()

    contacts_file.parent.mkdir(parents=True, exist_ok=True)
    audit_log_path.parent.mkdir(parents=True, exist_ok=True)

    return {
        "contacts_file": contacts_file,
        "audit_log_path": audit_log_path,
    }


def load_effective_config(root: Path, config_path: Path | None = None) -> dict[str, Any]:
    """Merge ``config/default.yaml`` (or ``config_path``) over built-in defaults."""
    path = config_path or root / "config" / "default.yaml"
    return merge_dicts(copy.deepcopy(DEFAULT_CONFIG), load_yaml(path))
