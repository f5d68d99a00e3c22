"""取り込みパスのオーケストレーション。"""
from __future__ import annotations

import logging
import sqlite3
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from sneaker_import.job import processor
from sneaker_import.job.grouper import build_groups
from sneaker_import.job.models import CandidateGroup
from sneaker_import.job.params import ImportParams
from sneaker_import.store import db, repo
from sneaker_import.store.files import DirectoryStore
from sneaker_import.store.ledger import ProcessedLedger
from sneaker_import.util.datetime_utils import run_id as make_run_id, utc_now_iso
from sneaker_import.util.image import ImageConverter
from sneaker_import.util.log import get_logger, log_run_summary

logger = logging.getLogger(__name__)

TRIGGER_WATCH = "watch"
TRIGGER_INTERVAL = "interval"
TRIGGER_MANUAL = "manual"
TRIGGER_STARTUP = "startup"


class OrchestratorState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    MATCHING = "matching"
    APPENDING = "appending"
    CREATING = "creating"


_ACTION_STATES = {
    processor.ACTION_APPENDED: OrchestratorState.APPENDING,
    processor.ACTION_CREATED: OrchestratorState.CREATING,
}


@dataclass
class RunSummary:
    run_id: Optional[str]
    trigger: str
    new_files_count: int = 0
    groups_count: int = 0
    listings_created_count: int = 0
    listings_appended_count: int = 0
    groups_skipped_count: int = 0
    errors_count: int = 0
    notes: str = ""


class Orchestrator:
    """
    1プロセスに1つ作る。RunLock・台帳・フォルダ操作をインスタンスで保持し、
    ウォッチャー・定期タイマー・手動実行はすべて run_once を通る。
    実行中に来たトリガーはキューに積まず捨てる。
    """

    def __init__(
        self,
        params: ImportParams,
        conn: sqlite3.Connection,
        ledger: ProcessedLedger,
        files: Optional[DirectoryStore] = None,
        converter: Optional[processor.Converter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.params = params
        self.conn = conn
        self.ledger = ledger
        self.files = files or DirectoryStore(params.shoes_dir)
        self.converter = converter or ImageConverter()
        self.enabled = params.enabled
        self.state = OrchestratorState.IDLE
        self._run_lock = threading.Lock()
        self._sleep = sleep

    @classmethod
    def from_params(cls, params: ImportParams) -> Orchestrator:
        """DB 接続・スキーマ作成・台帳読み込みまで済ませたインスタンスを返す。"""
        conn = db.get_connection(params.db_path)
        db.init_schema(conn)
        ledger = ProcessedLedger(params.processed_file)
        ledger.load()
        return cls(params, conn, ledger)

    def prepare(self) -> None:
        """監視フォルダ・アップロード先がなければ作る。"""
        self.files.ensure_dir()
        uploads = Path(self.params.uploads_dir)
        if not uploads.is_dir():
            uploads.mkdir(parents=True, exist_ok=True)
            logger.info("アップロード先フォルダを作成: %s", uploads)

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        logger.info("自動取り込み: %s", "有効" if enabled else "無効")

    def run_once(self, trigger: str = TRIGGER_MANUAL) -> Optional[RunSummary]:
        """
        1回の取り込みパス。無効化中・他のパスが実行中なら何もせず None。
        RunLock は例外時も finally で必ず解放する。
        """
        if not self.enabled:
            return None
        if not self._run_lock.acquire(blocking=False):
            logger.info("取り込み実行中のため %s トリガーを破棄", trigger)
            return None
        try:
            self.state = OrchestratorState.SCANNING
            return self._scan(trigger)
        finally:
            self.state = OrchestratorState.IDLE
            self._run_lock.release()

    def _select_groups(self, groups: dict[str, CandidateGroup], new_files: set[str]) -> tuple[list[CandidateGroup], int]:
        """新しいファイルを含むグループだけ残す。枚数不足で見送ったグループ数も返す。"""
        selected: list[CandidateGroup] = []
        too_small = 0
        for group in groups.values():
            if not any(f in new_files for f in group.filenames()):
                continue
            if group.image_count < self.params.min_images_per_listing:
                too_small += 1
                continue
            selected.append(group)
        return selected, too_small

    def _scan(self, trigger: str) -> RunSummary:
        listed = self.files.list_images()
        new_files = {img.filename for img in listed if not self.ledger.is_processed(img.filename)}
        if not new_files:
            return RunSummary(run_id=None, trigger=trigger, notes="no new files")

        run_id = make_run_id()
        repo.create_run(self.conn, run_id, trigger)
        summary = RunSummary(run_id=run_id, trigger=trigger, new_files_count=len(new_files))
        logger.info("新しい画像 %d件を検出 (trigger=%s)", len(new_files), trigger)

        try:
            groups, summary.groups_skipped_count = self._select_groups(build_groups(listed), new_files)
            summary.groups_count = len(groups)
            if not groups:
                logger.info("取り込み対象のグループはありません")
                summary.notes = "no qualifying groups"
                return summary

            logger.info("%dグループを処理します", len(groups))
            batch_size = self.params.batch_size
            for start in range(0, len(groups), batch_size):
                batch = groups[start : start + batch_size]
                logger.info("バッチ %d を処理中（%dグループ）", start // batch_size + 1, len(batch))
                for group in batch:
                    self._process_one(group, summary)
                if start + batch_size < len(groups) and self.params.batch_pause_sec > 0:
                    self._sleep(self.params.batch_pause_sec)
            logger.info("処理完了")
        except Exception as e:
            logger.exception("取り込みパスで致命的エラー: %s", e)
            summary.errors_count += 1
            summary.notes = str(e)
        finally:
            repo.update_run(
                self.conn,
                run_id,
                finished_at=utc_now_iso(),
                new_files_count=summary.new_files_count,
                groups_count=summary.groups_count,
                listings_created_count=summary.listings_created_count,
                listings_appended_count=summary.listings_appended_count,
                groups_skipped_count=summary.groups_skipped_count,
                errors_count=summary.errors_count,
                notes=summary.notes or None,
            )
            log_run_summary(
                get_logger("sneaker_import.run"),
                run_id,
                trigger,
                summary.new_files_count,
                summary.groups_count,
                summary.listings_created_count,
                summary.listings_appended_count,
                summary.groups_skipped_count,
                summary.errors_count,
                summary.notes,
            )
        return summary

    def _enter_action_state(self, action: str) -> None:
        self.state = _ACTION_STATES.get(action, self.state)

    def _process_one(self, group: CandidateGroup, summary: RunSummary) -> None:
        """1グループの失敗はログに残して次へ（台帳は未記録のまま）。"""
        self.state = OrchestratorState.MATCHING
        try:
            outcome = processor.process_group(
                self.conn, group, self.params, self.files, self.converter, self.ledger,
                on_state=self._enter_action_state,
            )
        except Exception as e:
            summary.errors_count += 1
            logger.exception("グループ処理失敗: group=%s %s", group.group_key, e)
            return
        finally:
            self.state = OrchestratorState.SCANNING
        if outcome.action == processor.ACTION_CREATED:
            summary.listings_created_count += 1
        elif outcome.action == processor.ACTION_APPENDED:
            summary.listings_appended_count += 1
        else:
            summary.groups_skipped_count += 1
