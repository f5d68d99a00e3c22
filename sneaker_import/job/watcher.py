"""
取り込みトリガーのスケジューリング。
フォルダ監視（watchdog）・定期タイマー・手動実行をすべて1つのキューに入れ、
1本の consumer スレッドが順に Orchestrator.run_once へ渡す。
"""
from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from sneaker_import.job import reconciler
from sneaker_import.job.runner import (
    TRIGGER_INTERVAL,
    TRIGGER_MANUAL,
    TRIGGER_STARTUP,
    TRIGGER_WATCH,
    Orchestrator,
)
from sneaker_import.store.files import is_image_file

logger = logging.getLogger(__name__)

EVENT_RECONCILE = "reconcile"
EVENT_STOP = "stop"


class ShoesFolderHandler(FileSystemEventHandler):
    """監視フォルダ直下の画像ファイルの作成・変更・移動を scheduler に通知する。"""

    def __init__(self, on_change: Callable[[str], None]) -> None:
        super().__init__()
        self._on_change = on_change

    def _notify(self, path: Any) -> None:
        if not path:
            return
        name = Path(str(path)).name
        if is_image_file(name):
            self._on_change(name)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._notify(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._notify(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._notify(getattr(event, "dest_path", None))


class ImportScheduler:
    """ファイルごとのデバウンスタイマー・定期タイマーを持ち、トリガーをキューに直列化する。"""

    def __init__(
        self,
        orchestrator: Orchestrator,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self.orchestrator = orchestrator
        self.params = orchestrator.params
        self._observer_factory = observer_factory
        self._observer: Optional[Any] = None
        self._queue: queue.Queue[tuple[str, Optional[str]]] = queue.Queue()
        self._timers: dict[str, threading.Timer] = {}
        self._timers_lock = threading.Lock()
        self._interval_timer: Optional[threading.Timer] = None
        self._reconcile_timer: Optional[threading.Timer] = None
        self._consumer: Optional[threading.Thread] = None
        self._stopped = threading.Event()
        self._scan_lock = threading.Lock()
        self._scan_pending = False

    # --- トリガー -------------------------------------------------------

    def _enqueue(self, trigger: str, filename: Optional[str] = None) -> bool:
        """
        実行中のパスがあればトリガーは捨てる（キューに積まない）。
        スキャン系のトリガーは、キューに未処理のものが1つあれば追加しない。
        """
        if trigger in (EVENT_RECONCILE, EVENT_STOP):
            self._queue.put((trigger, filename))
            return True
        if self.orchestrator.is_running:
            logger.debug("取り込み実行中のため %s トリガーを破棄", trigger)
            return False
        with self._scan_lock:
            if self._scan_pending:
                logger.debug("スキャン待ちがあるため %s トリガーをまとめました", trigger)
                return False
            self._scan_pending = True
        self._queue.put((trigger, filename))
        return True

    def notify_change(self, filename: str) -> None:
        """ファイル変更通知。同じファイルの古いタイマーは取り消し、静かになってから1回だけ発火。"""
        if not is_image_file(filename):
            return
        timer = threading.Timer(self.params.debounce_sec, self._on_quiet, args=(filename,))
        timer.daemon = True
        with self._timers_lock:
            old = self._timers.pop(filename, None)
            if old is not None:
                old.cancel()
            self._timers[filename] = timer
        timer.start()

    def _on_quiet(self, filename: str) -> None:
        with self._timers_lock:
            current = self._timers.get(filename)
            if current is not None and current is threading.current_thread():
                del self._timers[filename]
        if self._stopped.is_set():
            return
        self._enqueue(TRIGGER_WATCH, filename)

    def trigger_now(self) -> bool:
        """手動実行。実行中・スキャン待ちがあれば積まずに False。"""
        return self._enqueue(TRIGGER_MANUAL)

    def trigger_reconcile(self) -> None:
        self._enqueue(EVENT_RECONCILE)

    def _schedule_interval(self) -> None:
        if self._stopped.is_set():
            return
        timer = threading.Timer(self.params.scan_interval_sec, self._on_interval)
        timer.daemon = True
        self._interval_timer = timer
        timer.start()

    def _on_interval(self) -> None:
        if self._stopped.is_set():
            return
        self._enqueue(TRIGGER_INTERVAL)
        self._schedule_interval()

    @property
    def pending_timers(self) -> int:
        with self._timers_lock:
            return len(self._timers)

    def pending_events(self) -> int:
        return self._queue.qsize()

    # --- consumer ------------------------------------------------------

    def _consume(self) -> None:
        while True:
            trigger, filename = self._queue.get()
            try:
                if trigger == EVENT_STOP:
                    return
                if trigger == EVENT_RECONCILE:
                    reconciler.reconcile(self.orchestrator.conn)
                else:
                    with self._scan_lock:
                        self._scan_pending = False
                    if filename:
                        logger.debug("変更が落ち着きました: %s", filename)
                    self.orchestrator.run_once(trigger)
            except Exception as e:
                logger.exception("%s トリガーの処理でエラー: %s", trigger, e)
            finally:
                self._queue.task_done()

    # --- 起動・停止 -----------------------------------------------------

    def start(self, watch: bool = True, initial_scan: bool = True, reconcile_on_start: bool = True) -> None:
        self._stopped.clear()
        self.orchestrator.prepare()
        self._consumer = threading.Thread(target=self._consume, name="import-consumer", daemon=True)
        self._consumer.start()

        if reconcile_on_start:
            self._reconcile_timer = threading.Timer(self.params.reconcile_delay_sec, self.trigger_reconcile)
            self._reconcile_timer.daemon = True
            self._reconcile_timer.start()
        if initial_scan:
            self._enqueue(TRIGGER_STARTUP)
        if watch:
            self._observer = self._observer_factory()
            self._observer.schedule(
                ShoesFolderHandler(self.notify_change), str(self.orchestrator.files.root), recursive=False
            )
            self._observer.start()
        self._schedule_interval()

        logger.info("自動取り込みを開始しました")
        logger.info("監視フォルダ: %s", self.orchestrator.files.root)
        logger.info("定期チェック間隔: %s秒", self.params.scan_interval_sec)

    def stop(self, timeout: Optional[float] = 10.0) -> None:
        """タイマーと監視を止め、実行中のパスが終わるのを待つ（途中キャンセルはしない）。"""
        self._stopped.set()
        for timer in (self._interval_timer, self._reconcile_timer):
            if timer is not None:
                timer.cancel()
        with self._timers_lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout)
            self._observer = None
        if self._consumer is not None:
            self._queue.put((EVENT_STOP, None))
            self._consumer.join(timeout)
            self._consumer = None
