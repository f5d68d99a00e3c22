"""設定の読み込み・保存。main / watcher で共有。"""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).resolve().parent.parent


def default_config() -> dict[str, Any]:
    """デフォルト設定を返す。"""
    return {
        "paths": {
            "shoes_dir": str(ROOT / "SHOES"),
            "uploads_dir": str(ROOT / "uploads"),
            "processed_file": str(ROOT / ".processed-images.json"),
            "db_path": str(ROOT / "data" / "shoes.db"),
        },
        "import": {
            "enabled": True,
            "scan_interval_sec": 10,  # ウォッチ取りこぼし用のバックストップ
            "debounce_sec": 5,  # ファイル変更後の待ち時間（コピー完了待ち）
            "batch_size": 50,
            "batch_pause_sec": 1.0,
            "similarity_threshold": 0.85,
            "min_images_per_listing": 1,
            "reconcile_delay_sec": 5,
        },
        "defaults": {
            "msrp": 120,
            "price": 100,
        },
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """override を base に再帰的にマージ（セクション単位で欠けたキーをデフォルトで補う）。"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env(config: dict[str, Any]) -> dict[str, Any]:
    """環境変数によるパス・有効フラグの上書き。"""
    paths = config.setdefault("paths", {})
    for env_key, cfg_key in (
        ("SHOES_DIR", "shoes_dir"),
        ("UPLOADS_DIR", "uploads_dir"),
        ("PROCESSED_FILE", "processed_file"),
        ("STATE_DB_PATH", "db_path"),
    ):
        value = os.getenv(env_key)
        if value:
            paths[cfg_key] = value
    enabled = os.getenv("AUTO_IMPORT_ENABLED")
    if enabled is not None and enabled.strip():
        config.setdefault("import", {})["enabled"] = enabled.strip().lower() in ("1", "true", "yes", "on")
    return config


def load_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """config.yaml を読み込む。存在しなければデフォルトを返す。読み込みエラー時もデフォルトを返す。"""
    path = config_path or os.getenv("CONFIG_PATH") or str(ROOT / "config.yaml")
    config = default_config()
    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
            if isinstance(loaded, dict):
                config = _merge(config, loaded)
        except (OSError, yaml.YAMLError):
            config = default_config()
    return _apply_env(config)


def save_config(config: dict[str, Any], config_path: Optional[str] = None) -> None:
    """config.yaml に保存する。"""
    path = config_path or str(ROOT / "config.yaml")
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, allow_unicode=True, default_flow_style=False)
