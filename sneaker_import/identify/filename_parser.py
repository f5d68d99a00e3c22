"""表示用のファイル名パーサ。グループの既定 brand / model / description を決める。"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from sneaker_import.identify.patterns import DISPLAY_BRANDS, DISPLAY_MODELS
from sneaker_import.store.repo_listings import UNKNOWN_BRAND, UNKNOWN_MODEL

_SPLIT = re.compile(r"[-_\s]+")


@dataclass(frozen=True)
class ParsedFilename:
    brand: str
    model: str
    description: str
    filename: str


def _find_brand(parts: list[str]) -> Optional[str]:
    # 先頭3トークンまでを連結してブランド名と相互に部分一致を見る
    for i in range(min(len(parts), 3)):
        candidate = " ".join(parts[: i + 1]).lower()
        for brand in DISPLAY_BRANDS:
            b = brand.lower()
            if b in candidate or candidate in b:
                return brand
    for part in parts:
        p = part.lower()
        for brand in DISPLAY_BRANDS:
            if p == brand.lower() or brand.lower() in p:
                return brand
    return None


def parse_filename(filename: str) -> ParsedFilename:
    stem = os.path.splitext(os.path.basename(filename))[0]
    parts = [p for p in _SPLIT.split(stem) if p]

    brand = _find_brand(parts)

    model: Optional[str] = None
    stem_lower = stem.lower()
    for keyword in DISPLAY_MODELS:
        if keyword.lower() in stem_lower:
            model = keyword
            break

    if model is None and brand:
        brand_lower = brand.lower()
        index = next((i for i, p in enumerate(parts) if brand_lower in p.lower()), -1)
        if 0 <= index < len(parts) - 1:
            model = " ".join(parts[index + 1 : index + 3])

    description: Optional[str] = None
    if brand or model:
        used = [w.lower() for w in (brand or "").split() + (model or "").split()]
        remaining = [p for p in parts if p.lower() not in used]
        if remaining:
            description = " ".join(remaining)

    return ParsedFilename(
        brand=brand or UNKNOWN_BRAND,
        model=model or " ".join(parts[:2]) or UNKNOWN_MODEL,
        description=description or stem,
        filename=filename,
    )
