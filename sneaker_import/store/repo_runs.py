"""import_runs テーブルの CRUD。"""
from __future__ import annotations

import sqlite3
from typing import Any, Optional

from sneaker_import.store.models import RunRow
from sneaker_import.util.datetime_utils import utc_now_iso


def _row_to_run(row: sqlite3.Row) -> RunRow:
    return RunRow(
        run_id=row["run_id"],
        trigger=row["trigger"],
        started_at=row["started_at"],
        finished_at=row["finished_at"],
        new_files_count=row["new_files_count"] or 0,
        groups_count=row["groups_count"] or 0,
        listings_created_count=row["listings_created_count"] or 0,
        listings_appended_count=row["listings_appended_count"] or 0,
        groups_skipped_count=row["groups_skipped_count"] or 0,
        errors_count=row["errors_count"] or 0,
        notes=row["notes"],
    )


def create_run(conn: sqlite3.Connection, run_id: str, trigger: str) -> None:
    """新規 run を登録。"""
    conn.execute(
        "INSERT INTO import_runs (run_id, trigger, started_at, new_files_count, groups_count, "
        "listings_created_count, listings_appended_count, groups_skipped_count, errors_count) "
        "VALUES (?, ?, ?, 0, 0, 0, 0, 0, 0)",
        (run_id, trigger, utc_now_iso()),
    )
    conn.commit()


def update_run(
    conn: sqlite3.Connection,
    run_id: str,
    *,
    finished_at: Optional[str] = None,
    new_files_count: Optional[int] = None,
    groups_count: Optional[int] = None,
    listings_created_count: Optional[int] = None,
    listings_appended_count: Optional[int] = None,
    groups_skipped_count: Optional[int] = None,
    errors_count: Optional[int] = None,
    notes: Optional[str] = None,
) -> None:
    """run を更新。"""
    updates: list[str] = []
    args: list[Any] = []
    for column, value in (
        ("finished_at", finished_at),
        ("new_files_count", new_files_count),
        ("groups_count", groups_count),
        ("listings_created_count", listings_created_count),
        ("listings_appended_count", listings_appended_count),
        ("groups_skipped_count", groups_skipped_count),
        ("errors_count", errors_count),
        ("notes", notes),
    ):
        if value is not None:
            updates.append(f"{column} = ?")
            args.append(value)
    if not updates:
        return
    args.append(run_id)
    conn.execute(f"UPDATE import_runs SET {', '.join(updates)} WHERE run_id = ?", args)
    conn.commit()


def get_run(conn: sqlite3.Connection, run_id: str) -> Optional[RunRow]:
    """run_id で run を取得。"""
    row = conn.execute("SELECT * FROM import_runs WHERE run_id = ?", (run_id,)).fetchone()
    return _row_to_run(row) if row else None


def list_runs(conn: sqlite3.Connection, limit: int = 20) -> list[RunRow]:
    """直近の run（新しい順）。"""
    rows = conn.execute(
        "SELECT * FROM import_runs ORDER BY started_at DESC, run_id DESC LIMIT ?", (limit,)
    ).fetchall()
    return [_row_to_run(r) for r in rows]
