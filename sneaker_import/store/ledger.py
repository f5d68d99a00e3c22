"""
取り込み済みファイル名の台帳。
JSON（{"processed": [...], "lastUpdated": "..."}）に保存し、再起動後も再読み込みできる。
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, Union

from sneaker_import.util.datetime_utils import utc_now_iso

logger = logging.getLogger(__name__)


class ProcessedLedger:
    """ファイル名の追加専用セット。mark_processed は書き込み完了まで戻らない。"""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._processed: set[str] = set()
        self._lock = threading.Lock()

    def load(self) -> int:
        """
        台帳を読み込み、件数を返す。
        ファイルがない・壊れている場合は空として扱う（致命的にしない）。
        """
        processed: set[str] = set()
        if self.path.is_file():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                items = data.get("processed") if isinstance(data, dict) else None
                if not isinstance(items, list):
                    logger.warning("台帳の形式が不正です。空として扱います: %s", self.path)
                    items = []
                processed = {x for x in items if isinstance(x, str)}
            except (OSError, ValueError, TypeError) as e:
                logger.warning("台帳を読み込めません。空として扱います: %s (%s)", self.path, e)
                processed = set()
        with self._lock:
            self._processed = processed
        logger.info("取り込み済み台帳を読み込み: %d件", len(processed))
        return len(processed)

    def persist(self) -> None:
        """一時ファイルに書いてから置き換える（途中で落ちても元の台帳は壊れない）。"""
        with self._lock:
            self._write_locked(self._processed)

    def _write_locked(self, processed: set[str]) -> None:
        payload = {
            "processed": sorted(processed),
            "lastUpdated": utc_now_iso(),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".ledger-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def is_processed(self, filename: str) -> bool:
        with self._lock:
            return filename in self._processed

    def mark_processed(self, filenames: Iterable[str]) -> None:
        """取り込み済みとして追加し、同期的に保存する。空なら何もしない。"""
        names = [f for f in filenames if f]
        if not names:
            return
        with self._lock:
            updated = self._processed | set(names)
            # 書き込みに成功してからメモリ上の集合を差し替える
            self._write_locked(updated)
            self._processed = updated

    def reset(self) -> None:
        """台帳を空にする（テスト・CLI の --reset-ledger 専用）。"""
        with self._lock:
            self._write_locked(set())
            self._processed = set()

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._processed)

    def __contains__(self, filename: object) -> bool:
        return isinstance(filename, str) and self.is_processed(filename)

    def __len__(self) -> int:
        with self._lock:
            return len(self._processed)
