"""ストア用データモデル。"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ListingRow:
    id: int
    brand: str
    model: str
    description: Optional[str]
    msrp: Optional[float]
    price: Optional[float]
    size: Optional[str]
    gender: Optional[str]
    condition: Optional[str]
    created_at: str


@dataclass
class ListingImageRow:
    id: int
    listing_id: int
    stored_filename: str
    is_primary: bool
    display_order: int


@dataclass
class ListingMatchCandidate:
    """brand/model 完全一致検索の1行（画像枚数つき）。"""

    id: int
    brand: str
    model: str
    description: Optional[str]
    image_count: int


@dataclass
class RunRow:
    run_id: str
    trigger: str
    started_at: str
    finished_at: Optional[str]
    new_files_count: int
    groups_count: int
    listings_created_count: int
    listings_appended_count: int
    groups_skipped_count: int
    errors_count: int
    notes: Optional[str]
