"""共通フィクスチャ。"""
from __future__ import annotations

from pathlib import Path
from typing import Union

import pytest

from sneaker_import.job.params import ImportParams
from sneaker_import.job.runner import Orchestrator
from sneaker_import.store import db
from sneaker_import.store.files import DirectoryStore
from sneaker_import.store.ledger import ProcessedLedger


class StubConverter:
    """HEIC を「変換」したことにして同じフォルダに .jpg を作る。fail=True なら元の名前を返す。"""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    def is_convertible(self, filename: str) -> bool:
        return filename.lower().endswith((".heic", ".heif"))

    def convert(self, file_path: Union[str, Path]) -> str:
        path = Path(file_path)
        self.calls.append(path.name)
        if self.fail:
            return path.name
        jpg = path.with_name(path.stem + ".jpg")
        jpg.write_bytes(path.read_bytes())
        return jpg.name


def make_params(tmp_path: Path, **overrides) -> ImportParams:
    config = {
        "paths": {
            "shoes_dir": str(tmp_path / "SHOES"),
            "uploads_dir": str(tmp_path / "uploads"),
            "processed_file": str(tmp_path / ".processed-images.json"),
            "db_path": str(tmp_path / "shoes.db"),
        },
        "import": {"batch_pause_sec": 0, **overrides},
    }
    return ImportParams.from_config(config)


def drop_images(folder: Path, *names: str) -> None:
    folder.mkdir(parents=True, exist_ok=True)
    for name in names:
        (folder / name).write_bytes(b"fake-image-" + name.encode())


@pytest.fixture
def conn():
    c = db.get_connection(":memory:")
    db.init_schema(c)
    yield c
    c.close()


@pytest.fixture
def params(tmp_path):
    return make_params(tmp_path)


@pytest.fixture
def shoes_dir(params):
    path = Path(params.shoes_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def orchestrator(params, conn, shoes_dir):
    ledger = ProcessedLedger(params.processed_file)
    ledger.load()
    orch = Orchestrator(
        params,
        conn,
        ledger,
        files=DirectoryStore(shoes_dir),
        converter=StubConverter(),
        sleep=lambda _: None,
    )
    orch.prepare()
    return orch
