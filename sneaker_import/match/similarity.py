"""文字列類似度（レーベンシュタイン距離ベース）。"""
from __future__ import annotations

from typing import Optional


def levenshtein_distance(a: str, b: str) -> int:
    """編集距離（挿入・削除・置換いずれもコスト1）。"""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    1 - 距離 / 長い方の長さ。前後空白除去・小文字化してから比較。
    どちらかが空なら 0.0、一致すれば 1.0。
    """
    s1 = (a or "").strip().lower()
    s2 = (b or "").strip().lower()
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    return 1.0 - levenshtein_distance(s1, s2) / max(len(s1), len(s2))


def image_count_similarity(count_a: int, count_b: int) -> float:
    """画像枚数の近さ。max(0, 1 - |差| / 大きい方)。"""
    larger = max(count_a, count_b)
    if larger <= 0:
        return 1.0
    return max(0.0, 1.0 - abs(count_a - count_b) / larger)
