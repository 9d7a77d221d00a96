from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from colltab.build import Builder


@pytest.fixture
def builder() -> Builder:
    return Builder()


@pytest.fixture
def write_entries():
    def _write(path: Path, entries: list[dict[str, object]]) -> Path:
        path.write_text(
            json.dumps({"entries": entries}, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return path

    return _write
