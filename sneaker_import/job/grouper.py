"""
フォルダ内の画像を「1足ぶん」の候補グループにまとめる。
渡された一覧だけを使い、ファイルを読み直さない。
"""
from __future__ import annotations

import os
import re
from typing import Sequence

from sneaker_import.identify.filename_parser import parse_filename
from sneaker_import.job.models import CandidateGroup, SourceImage
from sneaker_import.store.files import is_image_file

GROUP_KEY_MAX_LENGTH = 40

_SEPARATORS = re.compile(r"[-_\s]+")
# iPhone などのカメラロール名（IMG_9751 / img-9751 / IMG9751）
_CAMERA_ROLL = re.compile(r"^img[-_]?(\d+)$", re.IGNORECASE)
# 撮影方向・連番などの末尾サフィックス。上から順に1回ずつ外す
_SUFFIXES = (
    re.compile(r"[-_](front|back|side|top|bottom|left|right|1|2|3|4|5|a|b|c|d|e)$", re.IGNORECASE),
    re.compile(r"[-_]img\d*$", re.IGNORECASE),
    re.compile(r"[-_]photo\d*$", re.IGNORECASE),
    re.compile(r"[-_]image\d*$", re.IGNORECASE),
    re.compile(r"\d+$"),
)


def group_key(filename: str) -> str:
    """
    グループキーを決める。
    カメラロール名は番号を10単位に丸めて同じ撮影タイミングのものをまとめる（9751, 9753 → img-9750）。
    それ以外は末尾の方向語・連番を外し、先頭40文字をキーにする。
    """
    stem = os.path.splitext(os.path.basename(filename))[0]
    base = _SEPARATORS.sub("-", stem.lower())

    m = _CAMERA_ROLL.match(base)
    if m:
        bucket = (int(m.group(1)) // 10) * 10
        return f"img-{bucket}"

    for pattern in _SUFFIXES:
        base = pattern.sub("", base)
    return base[:GROUP_KEY_MAX_LENGTH]


def build_groups(images: Sequence[SourceImage]) -> dict[str, CandidateGroup]:
    """
    画像一覧をグループキーごとにまとめる。グループ内の順序は一覧の順のまま（並べ替えない）。
    画像以外の拡張子は無視する。
    """
    groups: dict[str, CandidateGroup] = {}
    for image in images:
        if not is_image_file(image.filename):
            continue
        key = group_key(image.filename)
        group = groups.get(key)
        if group is None:
            parsed = parse_filename(image.filename)
            group = CandidateGroup(
                group_key=key,
                inferred_brand=parsed.brand,
                inferred_model=parsed.model,
                inferred_description=parsed.description,
            )
            groups[key] = group
        group.images.append(image)
    return groups
