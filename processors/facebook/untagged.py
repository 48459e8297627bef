#!/usr/bin/env python3
"""
Untagged media scan

Picks up media files sitting in the export's media folders that no JSON or
HTML document referenced, so nothing physically present is left behind.
"""

import logging
from typing import Iterable, List

from common.import_config import UNTAGGED_LAYOUT_DIRS, UNTAGGED_MEDIA_DIRS
from common.progress import PHASE_EXTRACT, progress_bar
from common.utils import is_supported_media, parent_dir_name
from processors.base import ExtractionContext
from processors.facebook.media import load_record, should_skip_uri
from processors.facebook.models import MediaRecord

logger = logging.getLogger(__name__)


def find_untagged_entries(context: ExtractionContext) -> List[str]:
    """Media entries in conventional folders not yet consumed by a strategy"""
    entries = []
    for name in context.index.names:
        if name in context.consumed or not name.startswith(context.prefix):
            continue
        if not is_supported_media(name) or should_skip_uri(name):
            continue
        relative = name[len(context.prefix):]
        if relative.startswith(UNTAGGED_MEDIA_DIRS):
            entries.append(name)
    return entries


def collect_untagged_media(
    context: ExtractionContext, known_source_ids: Iterable[str] = ()
) -> List[MediaRecord]:
    """Turn unreferenced media files into records.

    Source identity is "fb_media_" + the path relative to the data root; the
    album label is the containing folder unless it is a layout folder.

    Args:
        context: Extraction context after the strategies ran
        known_source_ids: Identities already extracted, never duplicated here

    Returns:
        New records in archive order
    """
    seen = set(known_source_ids)
    records: List[MediaRecord] = []

    entries = find_untagged_entries(context)
    for name in progress_bar(entries, PHASE_EXTRACT, "Scanning untagged media"):
        relative = name[len(context.prefix):]
        source_id = f"fb_media_{relative}"
        if source_id in seen:
            continue

        directory = parent_dir_name(name)
        album_name = directory if directory and directory not in UNTAGGED_LAYOUT_DIRS else None
        record = load_record(context, name, source_id=source_id, album_name=album_name)
        if record:
            records.append(record)
            seen.add(source_id)

    logger.info(f"Found {len(records)} untagged media file(s)")
    return records
