"""
1グループあたりの処理ロジック。
分類 → 既存出品との照合 → 既存への画像追加 or 新規作成 → 台帳更新。
"""
from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from sneaker_import.errors import ImageMaterializeError, ListingPersistError
from sneaker_import.identify import classifier
from sneaker_import.job.models import CandidateGroup, IdentifiedListing
from sneaker_import.job.params import ImportParams
from sneaker_import.match import matcher
from sneaker_import.store import repo
from sneaker_import.store.files import DirectoryStore
from sneaker_import.store.ledger import ProcessedLedger
from sneaker_import.util.datetime_utils import epoch_millis

logger = logging.getLogger(__name__)

ACTION_CREATED = "created"
ACTION_APPENDED = "appended"
ACTION_SKIPPED = "skipped"


class Converter(Protocol):
    def is_convertible(self, filename: str) -> bool: ...

    def convert(self, file_path: Union[str, Path]) -> str: ...


@dataclass
class GroupOutcome:
    action: str
    listing_id: Optional[int] = None
    images_added: int = 0
    # 台帳に記録したファイル名（HEIC 変換後の JPG 名も含む）
    processed_filenames: list[str] = field(default_factory=list)


@dataclass
class _StoredImage:
    source_filename: str
    stored_filename: str
    dest_path: Path


def _unique_dest_name(uploads_dir: Path, listing_id: int, index: int, ext: str) -> str:
    name = f"shoe-{listing_id}-{epoch_millis()}-{index}{ext}"
    n = 1
    while (uploads_dir / name).exists():
        name = f"shoe-{listing_id}-{epoch_millis()}-{index}-{n}{ext}"
        n += 1
    return name


def materialize_image(
    files: DirectoryStore,
    converter: Converter,
    filename: str,
    uploads_dir: Path,
    listing_id: int,
    index: int,
) -> _StoredImage:
    """
    元画像を uploads にコピーする。HEIC は先に同じフォルダで JPG に変換し、成功したら HEIC を削除。
    変換に失敗した場合は元ファイルをそのままコピー。元画像がなければ ImageMaterializeError。
    """
    if not files.exists(filename):
        logger.warning("画像が見つかりません: %s", filename)
        raise ImageMaterializeError(filename, "missing")

    source = filename
    if converter.is_convertible(filename):
        converted = converter.convert(files.path(filename))
        if converted != filename and files.exists(converted):
            source = converted
            try:
                files.delete(filename)
                logger.info("元の HEIC を削除: %s", filename)
            except OSError:
                logger.warning("元の HEIC を削除できません: %s", filename)

    ext = os.path.splitext(source)[1]
    dest_name = _unique_dest_name(uploads_dir, listing_id, index, ext)
    try:
        dest = files.copy_to(source, uploads_dir, dest_name)
    except OSError as e:
        raise ImageMaterializeError(source, str(e)) from e
    return _StoredImage(source_filename=source, stored_filename=dest_name, dest_path=dest)


def attach_images(
    conn: sqlite3.Connection,
    files: DirectoryStore,
    converter: Converter,
    uploads_dir: Path,
    listing_id: int,
    filenames: list[str],
    start_order: int,
    first_is_primary: bool,
) -> list[str]:
    """
    画像をコピーして画像行を登録。使った元ファイル名（変換後の名前を含む）を返す。
    画像行の登録に失敗したら、その1枚のコピーだけ削除して ListingPersistError。
    既に登録済みの行は戻さない。
    """
    used: list[str] = []
    for offset, filename in enumerate(filenames):
        order = start_order + offset
        stored = materialize_image(files, converter, filename, uploads_dir, listing_id, order)
        try:
            repo.insert_listing_image(
                conn,
                listing_id,
                stored.stored_filename,
                is_primary=first_is_primary and offset == 0,
                display_order=order,
            )
        except sqlite3.Error as e:
            try:
                stored.dest_path.unlink()
            except OSError:
                logger.warning("コピー済みファイルを削除できません: %s", stored.dest_path)
            raise ListingPersistError(f"image row insert failed for {filename}: {e}") from e
        used.append(filename)
        if stored.source_filename != filename:
            used.append(stored.source_filename)
    return used


def append_to_listing(
    conn: sqlite3.Connection,
    files: DirectoryStore,
    converter: Converter,
    uploads_dir: Path,
    listing_id: int,
    filenames: list[str],
) -> list[str]:
    """既存出品に画像を追加。display_order は既存の最大値の続きから。"""
    start = repo.get_max_display_order(conn, listing_id) + 1
    needs_primary = not repo.has_primary_image(conn, listing_id)
    return attach_images(conn, files, converter, uploads_dir, listing_id, filenames, start, needs_primary)


def create_listing(
    conn: sqlite3.Connection,
    files: DirectoryStore,
    converter: Converter,
    uploads_dir: Path,
    identified: IdentifiedListing,
    filenames: list[str],
    params: ImportParams,
) -> tuple[int, list[str]]:
    """新規出品を作成し、1枚目を primary として画像を登録する。"""
    try:
        listing_id = repo.create_listing(
            conn,
            brand=identified.brand,
            model=identified.model,
            description=identified.description or f"{identified.brand} {identified.model}",
            msrp=identified.msrp or params.default_msrp,
            price=identified.price or params.default_price,
            size=identified.size,
            gender=identified.gender,
            condition=identified.condition,
        )
    except sqlite3.Error as e:
        raise ListingPersistError(f"listing insert failed: {e}") from e
    used = attach_images(conn, files, converter, uploads_dir, listing_id, filenames, 0, True)
    return listing_id, used


def process_group(
    conn: sqlite3.Connection,
    group: CandidateGroup,
    params: ImportParams,
    files: DirectoryStore,
    converter: Converter,
    ledger: ProcessedLedger,
    on_state: Optional[Callable[[str], None]] = None,
) -> GroupOutcome:
    """
    1グループを処理する。台帳への記録は永続化が全て成功した後だけ。
    失敗時は例外を送出し、呼び出し側でログを出して次のグループへ進む（台帳は未記録のまま＝次回再試行）。
    """
    filenames = group.filenames()
    # 照合にはグループ全体の枚数を使い、コピーするのは未処理の画像だけ
    pending = [f for f in filenames if not ledger.is_processed(f)]
    if not pending:
        logger.info("スキップ: group=%s（全画像が取り込み済み）", group.group_key)
        return GroupOutcome(action=ACTION_SKIPPED)

    identified = classifier.identify(group)
    uploads_dir = Path(params.uploads_dir)

    candidates = repo.find_listings_by_brand_model(conn, identified.brand, identified.model, len(filenames))
    match = matcher.find_match(identified, filenames, candidates, threshold=params.similarity_threshold)

    if match:
        listing_id = match.candidate.id
        logger.info(
            "既存出品に一致: %s %s (id=%d, score=%.2f)、画像 %d枚を追加",
            match.candidate.brand, match.candidate.model, listing_id, match.score, len(pending),
        )
        if on_state:
            on_state(ACTION_APPENDED)
        used = append_to_listing(conn, files, converter, uploads_dir, listing_id, pending)
        ledger.mark_processed(used)
        return GroupOutcome(
            action=ACTION_APPENDED,
            listing_id=listing_id,
            images_added=len(pending),
            processed_filenames=used,
        )

    if identified.auto_identified:
        color_info = f" ({identified.color})" if identified.color else ""
        logger.info(
            "推定: %s %s%s - MSRP $%s (confidence=%d%s)",
            identified.brand, identified.model, color_info, identified.msrp, identified.confidence,
            "、要確認" if identified.needs_review else "",
        )
    if on_state:
        on_state(ACTION_CREATED)
    listing_id, used = create_listing(conn, files, converter, uploads_dir, identified, pending, params)
    ledger.mark_processed(used)
    logger.info(
        "新規出品を作成: %s %s (id=%d, 画像 %d枚)",
        identified.brand, identified.model, listing_id, len(pending),
    )
    return GroupOutcome(
        action=ACTION_CREATED,
        listing_id=listing_id,
        images_added=len(pending),
        processed_filenames=used,
    )
