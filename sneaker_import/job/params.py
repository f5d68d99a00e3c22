"""取り込みジョブのパラメータ。"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_SIMILARITY_THRESHOLD = 0.85


@dataclass(frozen=True)
class ImportParams:
    """取り込みの設定値（config.yaml の paths / import / defaults から作る）。"""

    enabled: bool
    scan_interval_sec: float
    debounce_sec: float
    batch_size: int
    batch_pause_sec: float
    similarity_threshold: float
    min_images_per_listing: int
    reconcile_delay_sec: float
    shoes_dir: str
    uploads_dir: str
    processed_file: str
    db_path: str
    default_msrp: float
    default_price: float

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ImportParams:
        paths_cfg = config.get("paths", {})
        import_cfg = config.get("import", {})
        defaults_cfg = config.get("defaults", {})

        batch_size = int(import_cfg.get("batch_size", DEFAULT_BATCH_SIZE))
        if batch_size < 1:
            logger.warning("batch_size=%d は不正です。%dに補正しました。", batch_size, DEFAULT_BATCH_SIZE)
            batch_size = DEFAULT_BATCH_SIZE

        threshold = float(import_cfg.get("similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD))
        if not 0.0 <= threshold <= 1.0:
            clamped = min(1.0, max(0.0, threshold))
            logger.warning("similarity_threshold=%s は0〜1の範囲外です。%sに補正しました。", threshold, clamped)
            threshold = clamped

        min_images = int(import_cfg.get("min_images_per_listing", 1))
        if min_images < 1:
            min_images = 1

        return cls(
            enabled=bool(import_cfg.get("enabled", True)),
            scan_interval_sec=max(1.0, float(import_cfg.get("scan_interval_sec", 10))),
            debounce_sec=max(0.0, float(import_cfg.get("debounce_sec", 5))),
            batch_size=batch_size,
            batch_pause_sec=max(0.0, float(import_cfg.get("batch_pause_sec", 1.0))),
            similarity_threshold=threshold,
            min_images_per_listing=min_images,
            reconcile_delay_sec=max(0.0, float(import_cfg.get("reconcile_delay_sec", 5))),
            shoes_dir=str(paths_cfg.get("shoes_dir", "SHOES")),
            uploads_dir=str(paths_cfg.get("uploads_dir", "uploads")),
            processed_file=str(paths_cfg.get("processed_file", ".processed-images.json")),
            db_path=str(paths_cfg.get("db_path", "data/shoes.db")),
            default_msrp=float(defaults_cfg.get("msrp", 120)),
            default_price=float(defaults_cfg.get("price", 100)),
        )
