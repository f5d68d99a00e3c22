"""CLI・コマンドのテスト。"""
import json
from pathlib import Path

import yaml

from sneaker_import import commands
from sneaker_import.main import main
from sneaker_import.store import db, repo
from sneaker_import.store.ledger import ProcessedLedger

from conftest import drop_images, make_params


def _write_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({
            "paths": {
                "shoes_dir": str(tmp_path / "SHOES"),
                "uploads_dir": str(tmp_path / "uploads"),
                "processed_file": str(tmp_path / ".processed-images.json"),
                "db_path": str(tmp_path / "shoes.db"),
            },
            "import": {"batch_pause_sec": 0},
        }),
        encoding="utf-8",
    )
    return path


def test_analyze_reports_groups_without_importing(tmp_path):
    params = make_params(tmp_path)
    drop_images(Path(params.shoes_dir), "nike-dunk-low-white-1.jpg", "nike-dunk-low-white-2.jpg", "IMG_9751.jpg")

    shoes = commands.analyze(params)

    assert [s["groupKey"] for s in shoes] == ["img-9750", "nike-dunk-low-white"]
    nike = shoes[1]
    assert (nike["brand"], nike["model"], nike["color"]) == ("Nike", "Dunk Low", "White")
    assert nike["imageCount"] == 2
    assert nike["needsReview"] is False
    assert not Path(params.uploads_dir).exists()


def test_convert_all_heic_counts(tmp_path, monkeypatch):
    params = make_params(tmp_path)
    shoes_dir = Path(params.shoes_dir)
    drop_images(shoes_dir, "a.heic", "b.HEIC", "c.jpg")

    def fake_convert(path, delete_original=False):
        path = Path(path)
        if path.name == "b.HEIC":
            return path.name
        path.with_suffix(".jpg").write_bytes(b"jpg")
        if delete_original:
            path.unlink()
        return path.stem + ".jpg"

    monkeypatch.setattr(commands.image, "convert_and_replace", fake_convert)
    counts = commands.convert_all_heic(params)

    assert counts == {"converted": 1, "deleted": 1, "errors": 1}


def test_reset_ledger(tmp_path):
    params = make_params(tmp_path)
    ProcessedLedger(params.processed_file).mark_processed(["a.jpg"])
    commands.reset_ledger(params)
    ledger = ProcessedLedger(params.processed_file)
    ledger.load()
    assert len(ledger) == 0


def test_main_without_flags_prints_help(capsys):
    assert main([]) == 0
    assert "--once" in capsys.readouterr().out


def test_main_once_imports_and_analyze_writes_json(tmp_path, monkeypatch):
    for key in ("SHOES_DIR", "UPLOADS_DIR", "PROCESSED_FILE", "STATE_DB_PATH", "AUTO_IMPORT_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    config = _write_config(tmp_path)
    drop_images(tmp_path / "SHOES", "vans-oldskool-1.jpg", "vans-oldskool-2.jpg")
    output = tmp_path / "analyzed.json"

    assert main(["--config", str(config), "--analyze", "--output", str(output), "--once"]) == 0

    analyzed = json.loads(output.read_text(encoding="utf-8"))
    assert analyzed[0]["brand"] == "Vans"
    conn = db.get_connection(str(tmp_path / "shoes.db"))
    try:
        assert [l.model for l in repo.list_listings(conn)] == ["Old Skool"]
    finally:
        conn.close()
