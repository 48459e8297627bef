#!/usr/bin/env python3
"""
fbimport - Facebook Export Importer

Parses a Facebook "Download your information" archive and imports its photos
and videos, with their albums, captions, comments and reactions, into a photo
library through its import job API.

Usage:
    fbimport.py <archive.zip> [--graph-api FILE] [--pair FRONT:BACK ...]
    fbimport.py <archive.zip> --dry-run
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add current directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from common.env_loader import load_dotenv_file
from common.import_config import ImportSettings
from common.logging_config import (
    add_archive_log_handler,
    remove_archive_log_handler,
    setup_logging,
)
from processors.facebook.processor import get_processor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import a Facebook export archive into your photo library.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show what the archive contains without uploading
  %(prog)s facebook-jane-2024.zip --dry-run

  # Import, merging comments fetched from the Graph API
  %(prog)s facebook-jane-2024.zip --graph-api graph_comments.json

  # Import with a scanned photo's back side linked to its front
  %(prog)s facebook-jane-2024.zip --pair 12:13 --pair front.jpg:back.jpg

  # Import without stopping every 50 items
  %(prog)s facebook-jane-2024.zip --no-pauses
        """,
    )

    parser.add_argument(
        "archive",
        help="Facebook export zip file",
    )
    parser.add_argument(
        "--graph-api",
        metavar="FILE",
        help="Graph API enrichment JSON (version 1) with full comment/reaction lists",
    )
    parser.add_argument(
        "--pair",
        metavar="FRONT:BACK",
        action="append",
        default=[],
        help="Link a photo's back side to its front, by position (see --dry-run) or "
        "filename. Repeatable.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse the archive and print the summary and media list; upload nothing",
    )
    parser.add_argument(
        "--no-pauses",
        action="store_true",
        help="Do not pause for confirmation between batches",
    )
    parser.add_argument(
        "--api-url",
        help="Import API URL (overrides env/.env FB_IMPORT_API_URL)",
    )
    parser.add_argument(
        "--token",
        help="Bearer token (overrides env/.env FB_IMPORT_TOKEN)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to .env file to load (default: ./.env if present)",
    )
    parser.add_argument(
        "--report",
        metavar="FILE",
        help="Write a JSON report of skipped documents and failed uploads",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Write a DEBUG log to this file",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> ImportSettings:
    """CLI > env > .env precedence"""
    settings = ImportSettings.from_env()
    if args.api_url:
        settings.api_url = args.api_url
    if args.token:
        settings.access_token = args.token
    if args.no_pauses:
        settings.skip_pauses = True
    return settings


def main(argv=None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load .env early (CLI > env > .env precedence is enforced in resolve_settings)
    load_dotenv_file(args.env_file)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    archive_path = Path(args.archive).resolve()
    if not archive_path.exists():
        print(f"ERROR: Archive does not exist: {archive_path}")
        return 1
    if not archive_path.is_file():
        print(f"ERROR: Archive path is not a file: {archive_path}")
        return 1

    processor = get_processor()
    if not processor.detect(archive_path):
        print(f"ERROR: Not a Facebook export archive: {archive_path}")
        return 1

    try:
        settings = resolve_settings(args)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Importing {archive_path.name} ({processor.get_name()})")
    print(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    handler = add_archive_log_handler(archive_path.stem, verbose=args.verbose)
    try:
        success = processor.process(
            str(archive_path),
            settings=settings,
            graph_api=args.graph_api,
            pairs=args.pair,
            dry_run=args.dry_run,
            report=args.report,
        )
    finally:
        remove_archive_log_handler(handler)

    if not success:
        print("ERROR: Import failed; see the log for details")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
