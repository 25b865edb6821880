"""JSON-file record store for milestones."""
from __future__ import annotations

import json
import os
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from .logging_config import logger

Milestone = Dict[str, Any]

# Guards read-modify-write sequences within this process only.
STORE_LOCK = threading.Lock()


def now_iso() -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def generate_id() -> str:
    return str(int(time.time() * 1000))


def load_milestones(path: Path) -> List[Milestone]:
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Unreadable milestone store at %s, treating it as empty", path)
        return []
    if not isinstance(data, list):
        logger.warning("Milestone store at %s does not hold a list, treating it as empty", path)
        return []
    milestones = [item for item in data if isinstance(item, dict)]
    if len(milestones) != len(data):
        logger.warning("Skipped %d non-object entries in milestone store at %s", len(data) - len(milestones), path)
    return milestones


def save_milestones(path: Path, milestones: List[Milestone]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
    tmp_path.write_text(json.dumps(milestones, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)


def append_milestone(path: Path, milestone: Milestone) -> List[Milestone]:
    with STORE_LOCK:
        milestones = load_milestones(path)
        milestones.append(milestone)
        save_milestones(path, milestones)
    return milestones


def remove_milestone(path: Path, milestone_id: str) -> tuple[List[Milestone], List[Milestone]]:
    """Drop every record whose id matches ``milestone_id`` as a string.

    Returns ``(before, after)``; the store is only rewritten when something matched.
    """
    with STORE_LOCK:
        before = load_milestones(path)
        after = [m for m in before if str(m.get("id")) != str(milestone_id)]
        if len(after) != len(before):
            save_milestones(path, after)
    return before, after
