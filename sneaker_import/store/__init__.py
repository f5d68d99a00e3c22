"""SQLite ストア・台帳・ファイル操作。"""
