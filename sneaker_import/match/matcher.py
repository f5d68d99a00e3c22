"""新しい候補と既存出品の一致判定（brand / model / 画像枚数の重み付きスコア）。"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from sneaker_import.job.models import IdentifiedListing
from sneaker_import.match.similarity import image_count_similarity, similarity
from sneaker_import.store.models import ListingMatchCandidate

DEFAULT_THRESHOLD = 0.85

BRAND_WEIGHT = 0.3
MODEL_WEIGHT = 0.4
IMAGE_COUNT_WEIGHT = 0.3


@dataclass
class MatchResult:
    candidate: ListingMatchCandidate
    score: float


def score_candidate(brand: str, model: str, image_count: int, candidate: ListingMatchCandidate) -> float:
    """0.3 × brand類似 + 0.4 × model類似 + 0.3 × 画像枚数類似。"""
    return (
        BRAND_WEIGHT * similarity(candidate.brand, brand)
        + MODEL_WEIGHT * similarity(candidate.model, model)
        + IMAGE_COUNT_WEIGHT * image_count_similarity(candidate.image_count, image_count)
    )


def find_match(
    listing: IdentifiedListing,
    image_filenames: Sequence[str],
    candidates: Sequence[ListingMatchCandidate],
    threshold: float = DEFAULT_THRESHOLD,
) -> Optional[MatchResult]:
    """
    brand / model が完全一致し、スコアが threshold 以上の候補のうち最高スコアを返す。
    同点は先に出てきた候補（ストアの並び順）を優先。該当なしは None（呼び出し側で新規作成）。
    """
    count = len(image_filenames)
    best: Optional[MatchResult] = None
    for candidate in candidates:
        if candidate.brand != listing.brand or candidate.model != listing.model:
            continue
        score = score_candidate(listing.brand, listing.model, count, candidate)
        if score < threshold:
            continue
        if best is None or score > best.score:
            best = MatchResult(candidate=candidate, score=score)
    return best
