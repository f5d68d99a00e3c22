"""
CLI エントリーポイント。--once, --watch, --reconcile, --analyze, --convert-heic, --reset-ledger を処理。
"""
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sneaker auto-import pipeline")
    parser.add_argument("--config", type=str, metavar="PATH", help="config.yaml path")
    parser.add_argument("--once", action="store_true", help="Run one import pass")
    parser.add_argument("--watch", action="store_true", help="Watch the SHOES folder and import continuously")
    parser.add_argument("--reconcile", action="store_true", help="Remove duplicate listings once")
    parser.add_argument("--analyze", action="store_true", help="Group and identify images without importing")
    parser.add_argument("--output", type=str, metavar="PATH", help="JSON output for --analyze")
    parser.add_argument("--convert-heic", action="store_true", help="Convert every HEIC in the SHOES folder to JPG")
    parser.add_argument("--keep-original", action="store_true", help="Keep HEIC files after --convert-heic")
    parser.add_argument("--reset-ledger", action="store_true", help="Forget which files were already imported")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not (args.once or args.watch or args.reconcile or args.analyze or args.convert_heic or args.reset_ledger):
        parser.print_help()
        return 0

    from sneaker_import import commands
    from sneaker_import.config import load_config
    from sneaker_import.job.params import ImportParams
    from sneaker_import.util.log import setup_logging

    setup_logging()
    params = ImportParams.from_config(load_config(args.config))

    if args.reset_ledger:
        commands.reset_ledger(params)
    if args.convert_heic:
        commands.convert_all_heic(params, delete_original=not args.keep_original)
    if args.analyze:
        shoes = commands.analyze(params)
        output = Path(args.output) if args.output else Path(params.shoes_dir).parent / "analyzed-shoes.json"
        output.write_text(json.dumps(shoes, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"Analysis saved to: {output}")
    if args.reconcile:
        commands.reconcile_once(params)
    if args.once:
        commands.import_once(params)
    if args.watch:
        scheduler = commands.start_watching(params)
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            scheduler.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
