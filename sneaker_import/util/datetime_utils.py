"""日時ユーティリティ。"""
from __future__ import annotations

import time
from datetime import datetime, timezone


def run_id() -> str:
    """取り込みパスID（UTC タイムスタンプ、連続実行でも重複しないようマイクロ秒まで）。"""
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")


def utc_now_iso() -> str:
    """UTC 現在時刻の ISO 形式文字列。"""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def epoch_millis() -> int:
    """保存ファイル名用のミリ秒タイムスタンプ。"""
    return int(time.time() * 1000)
