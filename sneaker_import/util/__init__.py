"""ユーティリティ。"""
