"""listing_images テーブルの CRUD。"""
from __future__ import annotations

import sqlite3

from sneaker_import.store.models import ListingImageRow


def _row_to_image(row: sqlite3.Row) -> ListingImageRow:
    return ListingImageRow(
        id=row["id"],
        listing_id=row["listing_id"],
        stored_filename=row["stored_filename"],
        is_primary=bool(row["is_primary"]),
        display_order=row["display_order"],
    )


def insert_listing_image(
    conn: sqlite3.Connection,
    listing_id: int,
    stored_filename: str,
    is_primary: bool,
    display_order: int,
) -> int:
    """画像行を登録し id を返す。stored_filename 重複・primary 重複は sqlite3.IntegrityError。"""
    cursor = conn.execute(
        "INSERT INTO listing_images (listing_id, stored_filename, is_primary, display_order) "
        "VALUES (?, ?, ?, ?)",
        (listing_id, stored_filename, 1 if is_primary else 0, display_order),
    )
    conn.commit()
    return int(cursor.lastrowid)


def count_images(conn: sqlite3.Connection, listing_id: int) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM listing_images WHERE listing_id = ?", (listing_id,)
    ).fetchone()
    return int(row[0]) if row else 0


def get_max_display_order(conn: sqlite3.Connection, listing_id: int) -> int:
    """最大 display_order。画像がなければ -1。"""
    row = conn.execute(
        "SELECT MAX(display_order) FROM listing_images WHERE listing_id = ?", (listing_id,)
    ).fetchone()
    return int(row[0]) if row and row[0] is not None else -1


def has_primary_image(conn: sqlite3.Connection, listing_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM listing_images WHERE listing_id = ? AND is_primary = 1", (listing_id,)
    ).fetchone()
    return row is not None


def get_listing_images(conn: sqlite3.Connection, listing_id: int) -> list[ListingImageRow]:
    """出品の画像一覧（display_order 順）。"""
    rows = conn.execute(
        "SELECT * FROM listing_images WHERE listing_id = ? ORDER BY display_order, id",
        (listing_id,),
    ).fetchall()
    return [_row_to_image(r) for r in rows]


def count_all_images(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) FROM listing_images").fetchone()
    return int(row[0]) if row else 0
