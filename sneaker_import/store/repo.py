"""
ストアリポジトリの集約エントリポイント。
listings / listing_images / import_runs の CRUD を一元提供。
"""
from __future__ import annotations

from sneaker_import.store.repo_runs import create_run, get_run, list_runs, update_run
from sneaker_import.store.repo_listings import (
    UNKNOWN_BRAND,
    UNKNOWN_MODEL,
    count_listings,
    create_listing,
    delete_listing_cascade,
    find_listings_by_brand_model,
    get_listing,
    list_listings,
    list_reconcile_candidates,
)
from sneaker_import.store.repo_images import (
    count_all_images,
    count_images,
    get_listing_images,
    get_max_display_order,
    has_primary_image,
    insert_listing_image,
)

__all__ = [
    "UNKNOWN_BRAND",
    "UNKNOWN_MODEL",
    "create_run",
    "update_run",
    "get_run",
    "list_runs",
    "count_listings",
    "create_listing",
    "delete_listing_cascade",
    "find_listings_by_brand_model",
    "get_listing",
    "list_listings",
    "list_reconcile_candidates",
    "count_all_images",
    "count_images",
    "get_listing_images",
    "get_max_display_order",
    "has_primary_image",
    "insert_listing_image",
]
