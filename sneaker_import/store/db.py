"""SQLite テーブル作成と接続。ストアフロント（shoes 一覧・管理画面）と同じ DB を共有する。"""
import os
import sqlite3
from pathlib import Path
from typing import Optional

# デフォルトはプロジェクトルートの data/shoes.db
def _default_db_path() -> str:
    base = Path(__file__).resolve().parent.parent.parent
    data_dir = base / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return str(data_dir / "shoes.db")

def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    path = db_path or os.getenv("STATE_DB_PATH") or _default_db_path()
    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    # ウォッチャー・タイマーのスレッドからも使うため check_same_thread=False（排他は RunLock で担保）
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn

def init_schema(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS listings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            brand TEXT NOT NULL,
            model TEXT NOT NULL,
            description TEXT,
            msrp REAL,
            price REAL,
            size TEXT,
            gender TEXT,
            condition TEXT,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS listing_images (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            listing_id INTEGER NOT NULL,
            stored_filename TEXT NOT NULL UNIQUE,
            is_primary INTEGER NOT NULL DEFAULT 0,
            display_order INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (listing_id) REFERENCES listings(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS import_runs (
            run_id TEXT PRIMARY KEY,
            trigger TEXT NOT NULL,
            started_at TEXT NOT NULL,
            finished_at TEXT,
            new_files_count INTEGER DEFAULT 0,
            groups_count INTEGER DEFAULT 0,
            listings_created_count INTEGER DEFAULT 0,
            listings_appended_count INTEGER DEFAULT 0,
            groups_skipped_count INTEGER DEFAULT 0,
            errors_count INTEGER DEFAULT 0,
            notes TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_listings_brand_model ON listings(brand, model);
        CREATE INDEX IF NOT EXISTS idx_listing_images_listing_id ON listing_images(listing_id);
        CREATE UNIQUE INDEX IF NOT EXISTS idx_listing_images_one_primary
            ON listing_images(listing_id) WHERE is_primary = 1;
    """)
    conn.commit()
