"""CLI の各サブ処理。"""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from sneaker_import.identify import classifier
from sneaker_import.job import reconciler
from sneaker_import.job.grouper import build_groups
from sneaker_import.job.params import ImportParams
from sneaker_import.job.runner import Orchestrator, RunSummary
from sneaker_import.job.watcher import ImportScheduler
from sneaker_import.store import db
from sneaker_import.store.files import DirectoryStore
from sneaker_import.store.ledger import ProcessedLedger
from sneaker_import.util import image

logger = logging.getLogger(__name__)


def import_once(params: ImportParams) -> RunSummary | None:
    orchestrator = Orchestrator.from_params(params)
    orchestrator.prepare()
    return orchestrator.run_once()


def start_watching(params: ImportParams) -> ImportScheduler:
    scheduler = ImportScheduler(Orchestrator.from_params(params))
    scheduler.start()
    return scheduler


def reconcile_once(params: ImportParams) -> reconciler.ReconcileResult:
    conn = db.get_connection(params.db_path)
    db.init_schema(conn)
    try:
        return reconciler.reconcile(conn)
    finally:
        conn.close()


def reset_ledger(params: ImportParams) -> None:
    ledger = ProcessedLedger(params.processed_file)
    ledger.reset()
    logger.info("取り込み済み台帳をクリア: %s", params.processed_file)


def convert_all_heic(params: ImportParams, delete_original: bool = True) -> dict[str, int]:
    """監視フォルダ内の HEIC をまとめて JPG に変換する。"""
    files = DirectoryStore(params.shoes_dir)
    targets = [img.filename for img in files.list_images() if image.is_convertible(img.filename)]
    counts = {"converted": 0, "deleted": 0, "errors": 0}
    if not targets:
        logger.info("HEIC ファイルはありません: %s", files.root)
        return counts

    logger.info("HEIC %d件を変換します", len(targets))
    for filename in targets:
        new_name = image.convert_and_replace(files.path(filename), delete_original=delete_original)
        if new_name == filename:
            counts["errors"] += 1
            continue
        counts["converted"] += 1
        if delete_original and not files.exists(filename):
            counts["deleted"] += 1
    logger.info(
        "HEIC 変換完了: converted=%d deleted=%d errors=%d",
        counts["converted"], counts["deleted"], counts["errors"],
    )
    return counts


def analyze(params: ImportParams) -> list[dict[str, Any]]:
    """取り込みはせず、グループ分けと推定結果だけを返す（確認用）。"""
    files = DirectoryStore(params.shoes_dir)
    files.ensure_dir()
    shoes: list[dict[str, Any]] = []
    for index, group in enumerate(build_groups(files.list_images()).values()):
        identified = classifier.identify(group)
        shoes.append({
            "id": f"temp-{index}",
            "groupKey": group.group_key,
            "brand": identified.brand,
            "model": identified.model,
            "color": identified.color,
            "description": identified.description,
            "msrp": identified.msrp,
            "price": identified.price,
            "size": identified.size,
            "gender": identified.gender,
            "condition": identified.condition,
            "images": [asdict(img) for img in group.images],
            "imageCount": group.image_count,
            "confidence": identified.confidence,
            "autoIdentified": identified.auto_identified,
            "needsReview": identified.needs_review,
        })
    total_images = sum(s["imageCount"] for s in shoes)
    logger.info("出品候補 %d件（画像 合計%d枚）", len(shoes), total_images)
    return shoes
