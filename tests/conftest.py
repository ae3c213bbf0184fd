from __future__ import annotations

import json
from pathlib import Path

import pytest

from sculpture_guide.data.store import DatasetStore

DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "sculptures.json"


@pytest.fixture
def store() -> DatasetStore:
    store = DatasetStore(DATA_PATH)
    assert store.load()
    return store


@pytest.fixture
def make_store(tmp_path: Path):
    """Build a store over an ad-hoc list of sculpture dicts."""

    def _make(sculptures: list[dict], general: dict | None = None) -> DatasetStore:
        path = tmp_path / "sculptures.json"
        document = {"general_information": general or {}, "sculptures": sculptures}
        path.write_text(json.dumps(document), encoding="utf-8")
        store = DatasetStore(path)
        assert store.load()
        return store

    return _make
