"""取り込みパイプライン内で受け渡すモデル（永続化しない）。"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SourceImage:
    """監視フォルダ内の元画像1枚。ファイル名がフォルダ内で一意の識別子。"""

    filename: str
    size_bytes: int = 0
    modified_at: float = 0.0


@dataclass
class CandidateGroup:
    """同じ1足を写していると推定される画像のまとまり。スキャンのたびに作り直す。"""

    group_key: str
    images: list[SourceImage] = field(default_factory=list)
    inferred_brand: str = "Unknown Brand"
    inferred_model: str = "Unknown Model"
    inferred_description: str = ""

    def filenames(self) -> list[str]:
        return [img.filename for img in self.images]

    @property
    def image_count(self) -> int:
        return len(self.images)


@dataclass
class IdentifiedListing:
    """CandidateGroup に推定ブランド・モデル・色・価格などを付与したもの。"""

    group: CandidateGroup
    brand: str
    model: str
    description: str
    color: Optional[str]
    msrp: int
    price: int
    size: str = "9"
    gender: str = "Mens"
    condition: str = "Excellent"
    confidence: int = 0
    needs_review: bool = True
    auto_identified: bool = True

    def filenames(self) -> list[str]:
        return self.group.filenames()

    @property
    def image_count(self) -> int:
        return self.group.image_count
