"""取り込み処理の例外。"""
from __future__ import annotations


class ImportPipelineError(Exception):
    """取り込みパイプラインの基底例外。"""


class ImageMaterializeError(ImportPipelineError):
    """元画像の取得・コピーに失敗（ファイル消失・ロック中など）。"""

    def __init__(self, filename: str, reason: str = "") -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Image not available: {filename}" + (f" ({reason})" if reason else ""))


class ListingPersistError(ImportPipelineError):
    """出品レコード・画像行の書き込みに失敗。"""
