"""
重複出品の整理。
brand / model が同じで画像枚数の差が2以内の出品ペアを順に見て、枚数の多い方（同数なら id の小さい方）を残す。
全体最適ではなくペアごとの貪欲法。連鎖した重複では別の組み合わせなら残ったはずの出品を消すことがある。
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Sequence

from sneaker_import.store import repo
from sneaker_import.store.models import ListingMatchCandidate

logger = logging.getLogger(__name__)

MAX_IMAGE_COUNT_DIFF = 2


@dataclass
class ReconcileResult:
    merged_count: int = 0
    removed_ids: list[int] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)


def _is_duplicate_pair(a: ListingMatchCandidate, b: ListingMatchCandidate) -> bool:
    return (
        a.brand == b.brand
        and a.model == b.model
        and abs(a.image_count - b.image_count) <= MAX_IMAGE_COUNT_DIFF
    )


def plan_removals(candidates: Sequence[ListingMatchCandidate]) -> list[tuple[int, int]]:
    """
    (残す id, 消す id) の一覧を返す。candidates は brand, model, id 順を想定。
    すべてのペアを元の候補一覧のまま比較し、負けた出品を初出順に1回ずつ消す。
    """
    removed: set[int] = set()
    plan: list[tuple[int, int]] = []
    for i, first in enumerate(candidates):
        for second in candidates[i + 1 :]:
            if not _is_duplicate_pair(first, second):
                continue
            # 同数なら先に並ぶ方（id の小さい方）を残す
            if first.image_count >= second.image_count:
                keep, drop = first, second
            else:
                keep, drop = second, first
            if drop.id in removed:
                continue
            removed.add(drop.id)
            plan.append((keep.id, drop.id))
    return plan


def reconcile(conn: sqlite3.Connection) -> ReconcileResult:
    """重複を削除し件数を返す。削除に失敗した出品は両方残し、次回の整理に回す。"""
    logger.info("重複出品をチェック中")
    result = ReconcileResult()
    candidates = repo.list_reconcile_candidates(conn)
    if len(candidates) < 2:
        return result

    plan = plan_removals(candidates)
    if not plan:
        logger.info("重複はありません")
        return result

    for keep_id, remove_id in plan:
        try:
            deleted = repo.delete_listing_cascade(conn, remove_id)
        except sqlite3.Error as e:
            logger.warning("重複出品を削除できません: id=%d（残す id=%d） %s", remove_id, keep_id, e)
            result.failed_ids.append(remove_id)
            continue
        if deleted:
            result.merged_count += 1
            result.removed_ids.append(remove_id)
            logger.info("重複出品を削除: id=%d（残す id=%d）", remove_id, keep_id)

    if result.merged_count:
        logger.info("重複出品 %d件を整理しました", result.merged_count)
    return result
