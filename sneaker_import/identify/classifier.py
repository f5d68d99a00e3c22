"""
ファイル名からブランド・モデル・色・価格を推定する。
すべて純粋関数（表は読み取り専用、呼び出し順や過去の呼び出しに依存しない）。
"""
from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from sneaker_import.identify import patterns
from sneaker_import.job.models import CandidateGroup, IdentifiedListing
from sneaker_import.store.repo_listings import UNKNOWN_BRAND, UNKNOWN_MODEL

BRAND_HIT_CONFIDENCE = 50
MODEL_HIT_CONFIDENCE = 30
TOKEN_HIT_CONFIDENCE = 30
REVIEW_THRESHOLD = 50
MIN_TOKEN_LENGTH = 3

_TOKEN_SPLIT = re.compile(r"[-_\s]+")


@dataclass(frozen=True)
class Classification:
    brand: Optional[str]
    model: Optional[str]
    confidence: int
    needs_review: bool


def _normalize(filenames: Sequence[str]) -> str:
    return " ".join(filenames).lower()


def _tokens(filenames: Sequence[str]) -> list[str]:
    tokens: list[str] = []
    for name in filenames:
        stem = os.path.splitext(name)[0].lower()
        tokens.extend(t for t in _TOKEN_SPLIT.split(stem) if t)
    return tokens


def _match_model(brand: str, text: str) -> Optional[str]:
    models = patterns.BRAND_PATTERNS[brand]["models"]
    for model, keywords in models.items():  # type: ignore[union-attr]
        if any(k in text for k in keywords):
            return model
    return None


def classify(filenames: Sequence[str]) -> Classification:
    """
    ファイル名群から brand / model / confidence を推定。
    ブランド表の順に最初にキーワードが含まれたブランドを採用（+50）、そのブランドのモデル表で最初の一致（+30）。
    直接一致がなければトークン（3文字以上）がブランド名・キーワードの部分文字列かで判定（+30、モデルなし）。
    """
    text = _normalize(filenames)
    brand: Optional[str] = None
    model: Optional[str] = None
    confidence = 0

    for name, data in patterns.BRAND_PATTERNS.items():
        if any(k in text for k in data["keywords"]):  # type: ignore[union-attr]
            brand = name
            confidence += BRAND_HIT_CONFIDENCE
            model = _match_model(name, text)
            if model:
                confidence += MODEL_HIT_CONFIDENCE
            break

    if brand is None:
        for token in _tokens(filenames):
            if len(token) < MIN_TOKEN_LENGTH:
                continue
            for name, data in patterns.BRAND_PATTERNS.items():
                if token in name.lower() or any(token in k for k in data["keywords"]):  # type: ignore[union-attr]
                    brand = name
                    confidence += TOKEN_HIT_CONFIDENCE
                    break
            if brand:
                break

    return Classification(
        brand=brand,
        model=model,
        confidence=confidence,
        needs_review=confidence < REVIEW_THRESHOLD,
    )


def detect_color(text: str) -> Optional[str]:
    """色キーワード表の順で最初に一致した色だけを返す。なければ None。"""
    lowered = text.lower()
    for color, aliases in patterns.COLOR_PATTERNS.items():
        if any(alias in lowered for alias in aliases):
            return color
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_msrp(brand: Optional[str], model: Optional[str]) -> int:
    """価格帯表の中央値。ブランド不明時は全体の既定値。"""
    if not brand or brand == UNKNOWN_BRAND or brand not in patterns.MSRP_TABLE:
        return patterns.GLOBAL_DEFAULT_MSRP
    bands = patterns.MSRP_TABLE[brand]
    low, high = bands.get(model or "") or bands.get("default") or patterns.BRAND_FALLBACK_BAND
    return _round_half_up((low + high) / 2)


def estimate_price(msrp: float) -> int:
    """中古販売価格の目安（MSRP の 80%）。"""
    return _round_half_up(msrp * patterns.RESALE_RATIO)


def _refine_model(filenames: Sequence[str]) -> Optional[str]:
    """確信度が低いとき、型番・複合キーワードでモデルを補う。"""
    tokens = _tokens(filenames)
    found: Optional[str] = None
    for num in patterns.MODEL_NUMBER_HINTS:
        if any(num in t for t in tokens):
            found = num
            break
    for model, keywords in patterns.MODEL_KEYWORD_HINTS.items():
        if all(any(k in t for t in tokens) for k in keywords):
            found = model
            break
    return found


def generate_description(brand: str, model: str, color: Optional[str]) -> str:
    parts: list[str] = []
    if brand and brand != UNKNOWN_BRAND:
        parts.append(brand)
    if model and model != UNKNOWN_MODEL:
        parts.append(model)
    if color:
        parts.append(color)
    parts.append(f"Size {patterns.DEFAULT_SIZE} {patterns.DEFAULT_GENDER}")
    parts.append("New")
    return " - ".join(parts)


def identify(group: CandidateGroup) -> IdentifiedListing:
    """グループを分類し、色・価格・説明文を付けた IdentifiedListing を返す。"""
    filenames = group.filenames()
    result = classify(filenames)
    color = detect_color(_normalize(filenames))

    brand = result.brand or group.inferred_brand or UNKNOWN_BRAND
    model = result.model
    if model is None and result.confidence < REVIEW_THRESHOLD:
        model = _refine_model(filenames)
    if model is None:
        model = group.inferred_model or UNKNOWN_MODEL

    msrp = estimate_msrp(brand, model)
    return IdentifiedListing(
        group=group,
        brand=brand,
        model=model,
        description=generate_description(brand, model, color),
        color=color,
        msrp=msrp,
        price=estimate_price(msrp),
        size=patterns.DEFAULT_SIZE,
        gender=patterns.DEFAULT_GENDER,
        condition=patterns.DEFAULT_CONDITION,
        confidence=result.confidence,
        needs_review=result.needs_review,
        auto_identified=True,
    )
