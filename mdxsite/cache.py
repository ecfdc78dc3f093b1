from __future__ import annotations

import hashlib
import json
from pathlib import Path

LOCK_VERSION = 1


def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str) -> str:
    return hash_bytes(text.encode("utf-8"))


def load_lock(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return {}
    if not isinstance(data, dict) or data.get("version") != LOCK_VERSION:
        return {}
    return data


def write_lock(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=True, sort_keys=True), encoding="utf-8")


def diff_manifest(previous: dict, current: dict) -> tuple[set, set, set]:
    """Return (added, removed, changed) output paths between two route maps."""
    added = {path for path in current if path not in previous}
    removed = {path for path in previous if path not in current}
    changed = {path for path in current if path in previous and current[path] != previous[path]}
    return added, removed, changed
