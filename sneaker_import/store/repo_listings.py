"""listings テーブルの CRUD。"""
from __future__ import annotations

import sqlite3
from typing import Optional

from sneaker_import.store.models import ListingMatchCandidate, ListingRow
from sneaker_import.util.datetime_utils import utc_now_iso

UNKNOWN_BRAND = "Unknown Brand"
UNKNOWN_MODEL = "Unknown Model"


def _row_to_listing(row: sqlite3.Row) -> ListingRow:
    return ListingRow(
        id=row["id"],
        brand=row["brand"],
        model=row["model"],
        description=row["description"],
        msrp=row["msrp"],
        price=row["price"],
        size=row["size"],
        gender=row["gender"],
        condition=row["condition"],
        created_at=row["created_at"],
    )


def _row_to_candidate(row: sqlite3.Row) -> ListingMatchCandidate:
    return ListingMatchCandidate(
        id=row["id"],
        brand=row["brand"],
        model=row["model"],
        description=row["description"],
        image_count=row["image_count"] or 0,
    )


def create_listing(
    conn: sqlite3.Connection,
    brand: str,
    model: str,
    description: Optional[str],
    msrp: Optional[float],
    price: Optional[float],
    size: Optional[str] = "9",
    gender: Optional[str] = "Mens",
    condition: Optional[str] = "Excellent",
) -> int:
    """出品を登録し、新しい id を返す。"""
    cursor = conn.execute(
        "INSERT INTO listings (brand, model, description, msrp, price, size, gender, condition, created_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (brand, model, description, msrp, price, size, gender, condition, utc_now_iso()),
    )
    conn.commit()
    return int(cursor.lastrowid)


def get_listing(conn: sqlite3.Connection, listing_id: int) -> Optional[ListingRow]:
    """id で出品を取得。"""
    row = conn.execute("SELECT * FROM listings WHERE id = ?", (listing_id,)).fetchone()
    return _row_to_listing(row) if row else None


def list_listings(conn: sqlite3.Connection) -> list[ListingRow]:
    """全出品を id 順で取得。"""
    rows = conn.execute("SELECT * FROM listings ORDER BY id").fetchall()
    return [_row_to_listing(r) for r in rows]


def count_listings(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) FROM listings").fetchone()
    return int(row[0]) if row else 0


def find_listings_by_brand_model(
    conn: sqlite3.Connection,
    brand: str,
    model: str,
    image_count: int,
    max_count_diff: int = 3,
    limit: int = 5,
) -> list[ListingMatchCandidate]:
    """
    brand / model が完全一致する既存出品を、画像枚数の差が max_count_diff 以内のものに限って返す。
    画像枚数の多い順（同数は id 昇順）。スコアリングは呼び出し側（matcher）で行う。
    """
    rows = conn.execute(
        """
        SELECT l.id, l.brand, l.model, l.description, COUNT(li.id) AS image_count
        FROM listings l
        LEFT JOIN listing_images li ON l.id = li.listing_id
        WHERE l.brand = ? AND l.model = ?
        GROUP BY l.id
        HAVING ABS(COUNT(li.id) - ?) <= ?
        ORDER BY image_count DESC, l.id ASC
        LIMIT ?
        """,
        (brand, model, image_count, max_count_diff, limit),
    ).fetchall()
    return [_row_to_candidate(r) for r in rows]


def list_reconcile_candidates(conn: sqlite3.Connection) -> list[ListingMatchCandidate]:
    """
    重複整理の対象候補。画像が1枚以上あり、Unknown Brand / Unknown Model を除いたもの。
    brand, model, id の順に並べる。
    """
    rows = conn.execute(
        """
        SELECT l.id, l.brand, l.model, l.description, COUNT(li.id) AS image_count
        FROM listings l
        LEFT JOIN listing_images li ON l.id = li.listing_id
        WHERE l.brand != ? AND l.model != ?
        GROUP BY l.id
        HAVING COUNT(li.id) > 0
        ORDER BY l.brand, l.model, l.id
        """,
        (UNKNOWN_BRAND, UNKNOWN_MODEL),
    ).fetchall()
    return [_row_to_candidate(r) for r in rows]


def delete_listing_cascade(conn: sqlite3.Connection, listing_id: int) -> bool:
    """
    出品と紐づく画像行を1トランザクションで削除。存在すれば True。
    途中で失敗した場合はロールバックして例外を送出する（どちらも残る）。
    """
    try:
        conn.execute("DELETE FROM listing_images WHERE listing_id = ?", (listing_id,))
        cursor = conn.execute("DELETE FROM listings WHERE id = ?", (listing_id,))
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    return cursor.rowcount > 0
