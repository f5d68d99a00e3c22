"""監視フォルダ（SHOES）・アップロード先（uploads）のファイル操作。"""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Union

from sneaker_import.job.models import SourceImage

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".heif")


def is_image_file(filename: str) -> bool:
    return os.path.splitext(filename)[1].lower() in IMAGE_EXTENSIONS


class DirectoryStore:
    """1つのフォルダ（サブフォルダは見ない）に対するファイル操作。"""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def ensure_dir(self) -> bool:
        """フォルダがなければ作成。作成した場合 True。"""
        if self.root.is_dir():
            return False
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("フォルダを作成: %s", self.root)
        return True

    def path(self, filename: str) -> Path:
        return self.root / filename

    def exists(self, filename: str) -> bool:
        return self.path(filename).is_file()

    def list_images(self) -> list[SourceImage]:
        """
        画像拡張子のファイルを SourceImage にして返す（ファイル名順）。
        一覧取得後に消えたファイルは黙ってスキップ。
        """
        if not self.root.is_dir():
            return []
        result: list[SourceImage] = []
        for name in sorted(os.listdir(self.root)):
            if not is_image_file(name):
                continue
            try:
                st = self.path(name).stat()
            except OSError:
                continue
            if not os.path.isfile(self.path(name)):
                continue
            result.append(SourceImage(filename=name, size_bytes=st.st_size, modified_at=st.st_mtime))
        return result

    def copy_to(self, filename: str, dest_dir: Union[str, Path], dest_filename: str) -> Path:
        """dest_dir/dest_filename にコピーしてコピー先パスを返す。"""
        dest = Path(dest_dir) / dest_filename
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self.path(filename), dest)
        return dest

    def delete(self, filename: str) -> bool:
        """削除できれば True。存在しなければ False。"""
        try:
            self.path(filename).unlink()
            return True
        except FileNotFoundError:
            return False
