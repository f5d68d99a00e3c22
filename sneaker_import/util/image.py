"""画像変換ユーティリティ。HEIC/HEIF を同じフォルダ内で JPEG に変換する。"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

import pillow_heif
from PIL import Image

pillow_heif.register_heif_opener()

logger = logging.getLogger(__name__)

HEIC_EXTENSIONS = (".heic", ".heif")


def is_convertible(filename: str) -> bool:
    """HEIC/HEIF 形式か（拡張子で判定、大文字小文字を区別しない）。"""
    return os.path.splitext(filename)[1].lower() in HEIC_EXTENSIONS


def convert_heic_to_jpg(file_path: Union[str, Path], quality: int = 90) -> str:
    """
    HEIC を同じディレクトリの <stem>.jpg に変換し、新しいファイル名を返す。
    変換対象外・変換失敗時は元のファイル名を返す（失敗は致命的にしない）。
    """
    path = Path(file_path)
    if not is_convertible(path.name):
        return path.name

    jpg_path = path.with_name(path.stem + ".jpg")
    try:
        with Image.open(path) as img:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            img.save(jpg_path, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        logger.warning("HEIC 変換失敗（元ファイルを使用）: %s (%s)", path.name, e)
        if jpg_path.exists():
            try:
                jpg_path.unlink()
            except OSError:
                logger.warning("途中まで書いた JPG を削除できません: %s", jpg_path.name)
        return path.name

    if not jpg_path.exists():
        return path.name
    logger.info("HEIC を JPG に変換: %s -> %s", path.name, jpg_path.name)
    return jpg_path.name


def convert_and_replace(file_path: Union[str, Path], delete_original: bool = False) -> str:
    """変換し、成功した場合に限り元の HEIC を削除する。"""
    path = Path(file_path)
    new_name = convert_heic_to_jpg(path)
    if new_name != path.name and delete_original:
        try:
            path.unlink()
            logger.info("元の HEIC を削除: %s", path.name)
        except OSError:
            logger.warning("元の HEIC を削除できません: %s", path.name)
    return new_name


class ImageConverter:
    """取り込み処理から差し替え可能な変換器（テストではスタブに置き換える）。"""

    def is_convertible(self, filename: str) -> bool:
        return is_convertible(filename)

    def convert(self, file_path: Union[str, Path]) -> str:
        return convert_heic_to_jpg(file_path)
