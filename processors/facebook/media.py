#!/usr/bin/env python3
"""
Record construction shared by the extraction strategies
"""

import logging
import zipfile
from typing import Optional

from common.filter_banned_files import BannedFilesFilter
from common.utils import basename, get_media_kind
from processors.base import ExtractionContext
from processors.facebook.models import MediaRecord

logger = logging.getLogger(__name__)

banned_filter = BannedFilesFilter()


def should_skip_uri(uri: str) -> bool:
    """True for sticker/GIF assets and OS junk that are never user media"""
    return banned_filter.is_banned(uri)


def load_record(
    context: ExtractionContext,
    entry_path: str,
    source_id: str,
    filename: Optional[str] = None,
    force_video: bool = False,
    **fields,
) -> Optional[MediaRecord]:
    """Read an archive entry and wrap it in a MediaRecord.

    Args:
        context: Extraction context (the entry is marked consumed)
        entry_path: Resolved archive entry
        source_id: Deduplication key for this extraction pass
        filename: Original filename; defaults to the entry's basename
        force_video: Treat the payload as video regardless of extension
        **fields: Optional MediaRecord metadata (created_at, album_name, ...)

    Returns:
        The record, or None if the entry could not be read
    """
    filename = filename or basename(entry_path) or "media"
    try:
        payload = context.index.read_bytes(entry_path)
    except (KeyError, zipfile.BadZipFile, OSError, RuntimeError) as e:
        logger.warning(f"Failed to read media {entry_path}: {e}")
        context.tracker.add_skipped_document(entry_path, f"unreadable media: {e}")
        return None

    media_kind = "video" if force_video else (get_media_kind(filename) or "photo")
    context.consumed.add(entry_path)
    return MediaRecord(
        payload=payload,
        filename=filename,
        source_id=source_id,
        media_kind=media_kind,
        entry_path=entry_path,
        **fields,
    )
