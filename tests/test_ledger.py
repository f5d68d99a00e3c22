"""ProcessedLedger のユニットテスト。"""
import json
import os

import pytest

from sneaker_import.store.ledger import ProcessedLedger


def test_missing_file_loads_empty(tmp_path):
    ledger = ProcessedLedger(tmp_path / "ledger.json")
    assert ledger.load() == 0
    assert not ledger.is_processed("a.jpg")


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text("{not json", encoding="utf-8")
    ledger = ProcessedLedger(path)
    assert ledger.load() == 0


@pytest.mark.parametrize("payload", ['{"processed": null}', '{"processed": 5}', '["a.jpg"]', '{"processed": {"a.jpg": 1}}'])
def test_wrong_shape_loads_empty(tmp_path, payload):
    path = tmp_path / "ledger.json"
    path.write_text(payload, encoding="utf-8")
    ledger = ProcessedLedger(path)
    assert ledger.load() == 0
    assert not ledger.is_processed("a.jpg")


def test_mark_processed_persists_before_returning(tmp_path):
    path = tmp_path / "ledger.json"
    ledger = ProcessedLedger(path)
    ledger.mark_processed(["a.jpg", "b.jpg"])

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["processed"] == ["a.jpg", "b.jpg"]
    assert data["lastUpdated"]

    reloaded = ProcessedLedger(path)
    reloaded.load()
    assert "a.jpg" in reloaded
    assert len(reloaded) == 2


def test_mark_processed_is_additive(tmp_path):
    ledger = ProcessedLedger(tmp_path / "ledger.json")
    ledger.mark_processed(["a.jpg"])
    ledger.mark_processed(["b.jpg"])
    assert ledger.snapshot() == frozenset({"a.jpg", "b.jpg"})


def test_empty_mark_is_noop(tmp_path):
    path = tmp_path / "ledger.json"
    ledger = ProcessedLedger(path)
    ledger.mark_processed([])
    assert not path.exists()


def test_reset_clears(tmp_path):
    path = tmp_path / "ledger.json"
    ledger = ProcessedLedger(path)
    ledger.mark_processed(["a.jpg"])
    ledger.reset()
    reloaded = ProcessedLedger(path)
    reloaded.load()
    assert len(reloaded) == 0


def test_failed_write_leaves_membership_unchanged(tmp_path, monkeypatch):
    path = tmp_path / "ledger.json"
    ledger = ProcessedLedger(path)
    ledger.mark_processed(["a.jpg"])

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(OSError):
        ledger.mark_processed(["b.jpg"])

    assert not ledger.is_processed("b.jpg")
    assert ledger.snapshot() == frozenset({"a.jpg"})
    assert list(tmp_path.iterdir()) == [path]
