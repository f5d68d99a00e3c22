"""store（SQLite リポジトリ）のテスト。"""
import sqlite3

import pytest

from sneaker_import.store import repo


def test_display_order_and_primary(conn):
    listing_id = repo.create_listing(conn, "Nike", "Dunk Low", "Nike - Dunk Low", 110, 88)
    assert repo.get_max_display_order(conn, listing_id) == -1
    assert not repo.has_primary_image(conn, listing_id)

    repo.insert_listing_image(conn, listing_id, "shoe-1-a.jpg", True, 0)
    repo.insert_listing_image(conn, listing_id, "shoe-1-b.jpg", False, 1)

    assert repo.get_max_display_order(conn, listing_id) == 1
    assert repo.has_primary_image(conn, listing_id)
    assert repo.count_images(conn, listing_id) == 2


def test_second_primary_is_rejected(conn):
    listing_id = repo.create_listing(conn, "Nike", "Dunk Low", None, 110, 88)
    repo.insert_listing_image(conn, listing_id, "shoe-1-a.jpg", True, 0)
    with pytest.raises(sqlite3.IntegrityError):
        repo.insert_listing_image(conn, listing_id, "shoe-1-b.jpg", True, 1)


def test_stored_filename_is_unique(conn):
    listing_id = repo.create_listing(conn, "Nike", "Dunk Low", None, 110, 88)
    repo.insert_listing_image(conn, listing_id, "shoe-1-a.jpg", True, 0)
    with pytest.raises(sqlite3.IntegrityError):
        repo.insert_listing_image(conn, listing_id, "shoe-1-a.jpg", False, 1)


def test_delete_listing_cascade(conn):
    listing_id = repo.create_listing(conn, "Vans", "Old Skool", None, 120, 96)
    repo.insert_listing_image(conn, listing_id, "shoe-1-a.jpg", True, 0)

    assert repo.delete_listing_cascade(conn, listing_id) is True
    assert repo.get_listing(conn, listing_id) is None
    assert repo.count_all_images(conn) == 0
    assert repo.delete_listing_cascade(conn, listing_id) is False


def test_find_by_brand_model_orders_by_image_count(conn):
    small = repo.create_listing(conn, "Nike", "Dunk Low", None, 110, 88)
    big = repo.create_listing(conn, "Nike", "Dunk Low", None, 110, 88)
    repo.insert_listing_image(conn, small, "s-0.jpg", True, 0)
    for i in range(3):
        repo.insert_listing_image(conn, big, f"b-{i}.jpg", i == 0, i)

    found = repo.find_listings_by_brand_model(conn, "Nike", "Dunk Low", 2)
    assert [c.id for c in found] == [big, small]
    assert [c.image_count for c in found] == [3, 1]
    assert repo.find_listings_by_brand_model(conn, "nike", "Dunk Low", 2) == []


def test_run_lifecycle(conn):
    repo.create_run(conn, "20260101000000000001", "manual")
    repo.update_run(conn, "20260101000000000001", finished_at="2026-01-01T00:00:01Z", listings_created_count=2)

    run = repo.get_run(conn, "20260101000000000001")
    assert run.trigger == "manual"
    assert run.listings_created_count == 2
    assert run.errors_count == 0
    assert [r.run_id for r in repo.list_runs(conn)] == ["20260101000000000001"]
