# -*- coding: utf-8 -*-
"""Debug snapshot documents (`<TMP_DIR>/<GKey>/*.json`)."""

from __future__ import annotations

import json
from datetime import datetime
from importlib import metadata
from pathlib import Path
from typing import Any, Dict

TOOL_NAME = "gtypegen"


def now_iso() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def tool_version() -> str:
    try:
        return metadata.version(TOOL_NAME)
    except metadata.PackageNotFoundError:
        # running from a checkout without `pip install -e .`
        return "unknown"


def snapshot_meta(**extra: Any) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"tool": TOOL_NAME, "version": tool_version(), "generated": now_iso()}
    meta.update(extra)
    return meta


def write_snapshot(path: Path, payload: Dict[str, Any], **extra: Any) -> Path:
    doc = {"meta": snapshot_meta(**extra), **payload}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
