from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pytest

from core.gtypes.descriptors import GeneratorConfig


@pytest.fixture
def descriptor_dir(tmp_path: Path) -> Path:
    d = tmp_path / "config"
    d.mkdir()
    return d


@pytest.fixture
def write_descriptor(descriptor_dir: Path):
    def _write(gkey: str, **fields) -> Path:
        doc = GeneratorConfig(GKey=gkey).to_dict()
        doc.update(fields)
        path = descriptor_dir / f"{gkey}.json"
        path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def items_data() -> dict:
    return {
        "items": [
            {"id": "a", "type": "weapon", "g": 10},
            {"id": "b", "type": "shield", "g": 5},
        ]
    }
