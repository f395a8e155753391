#!/usr/bin/env python3
"""
Extract catalog fields from ClinicalTrials.gov JSON files and export the
field-by-file comparison table as an HTML-based .xls document.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import Config, FIELD_CATALOG
from data_services import ExportService
from exceptions import ExportPreconditionError
from models import UploadedTrialFile
from state_manager import ExtractionSession

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract clinical trial fields from CT.gov JSON files.")
    parser.add_argument("files", nargs="*", type=Path, help="Trial JSON files, compared in the given order.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(Config.EXPORT_FILE_NAME),
        help="Export path (HTML table readable by spreadsheet programs).",
    )
    parser.add_argument(
        "--fields",
        nargs="+",
        default=None,
        help="Field names to export (default: all fields).",
    )
    parser.add_argument("--list-fields", action="store_true", help="Print the field catalog and exit.")
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Logging level.")
    return parser.parse_args(argv)


def load_files(paths: List[Path]) -> List[UploadedTrialFile]:
    files = []
    for path in paths:
        try:
            files.append(UploadedTrialFile(name=path.name, content=path.read_bytes()))
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            print(f"[WARN] Cannot read {path}: {e}", file=sys.stderr)
    return files


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_fields:
        for name in FIELD_CATALOG:
            print(name)
        return 0

    session = ExtractionSession(selected_fields=args.fields)
    session.process_files(load_files(args.files))
    if session.error:
        print(session.error.strip(), file=sys.stderr)

    try:
        path = ExportService.write(args.output, session.records, session.selected_fields)
    except ExportPreconditionError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(f"Wrote {len(session.records)} file(s) to {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
