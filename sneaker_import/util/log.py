"""簡易ロギング。取り込みサマリを必ず出せるようにする。"""
import logging
import sys
from typing import Any

def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

def log_run_summary(
    logger: logging.Logger,
    run_id: str,
    trigger: str,
    new_files_count: int,
    groups_count: int,
    listings_created_count: int,
    listings_appended_count: int,
    groups_skipped_count: int,
    errors_count: int,
    notes: str = "",
    **extra: Any,
) -> None:
    logger.info(
        "run_summary run_id=%s trigger=%s new_files=%s groups=%s created=%s appended=%s skipped=%s errors=%s notes=%s",
        run_id,
        trigger,
        new_files_count,
        groups_count,
        listings_created_count,
        listings_appended_count,
        groups_skipped_count,
        errors_count,
        notes or "(none)",
        extra=extra,
    )
