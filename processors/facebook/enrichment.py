#!/usr/bin/env python3
"""
Graph API enrichment merge

An optional JSON file fetched separately from the Graph API carries the full
comment and reaction lists for photos, keyed by Facebook photo id:

    {"version": 1,
     "photos": {"10150123": {"comments": [{"from_name": ..., "message": ...,
                                           "created_time": ...}],
                             "reactions": [{"from_name": ..., "type": "LOVE"}]}}}

Comments from the file replace the archive's for that photo; reactions are
added unless an identical (author, type) pair is already there.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from common.exceptions import InvalidEnrichmentFile
from processors.facebook.matching import IdentityMatcher
from processors.facebook.models import Comment, MediaRecord, Reaction
from processors.facebook.text import parse_iso_datetime, utc_now

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1


@dataclass
class GraphApiStats:
    matched: int = 0
    comments: int = 0
    reactions: int = 0


def load_enrichment(content: str) -> Dict[str, Any]:
    """Parse and validate an enrichment file, returning its photos mapping"""
    try:
        data = json.loads(content)
    except ValueError as e:
        raise InvalidEnrichmentFile(f"Enrichment file is not valid JSON: {e}")

    if not isinstance(data, dict) or data.get("version") != SUPPORTED_VERSION:
        version = data.get("version") if isinstance(data, dict) else None
        raise InvalidEnrichmentFile(f"Unsupported enrichment file version: {version!r}")

    photos = data.get("photos")
    if not isinstance(photos, dict):
        raise InvalidEnrichmentFile("Enrichment file has no photos mapping")
    return photos


def _to_comment(item: Dict[str, Any]) -> Comment:
    return Comment(
        author_name=item.get("from_name") or "Unknown",
        text=item.get("message") or "",
        timestamp=parse_iso_datetime(item.get("created_time")) or utc_now(),
    )


def merge_graph_api(
    content: str, records: Sequence[MediaRecord], identity: IdentityMatcher
) -> GraphApiStats:
    """Merge an enrichment file into the records it names.

    Args:
        content: Raw enrichment file text
        records: Deduplicated records, indexed by identity
        identity: Photo id lookup built over records

    Returns:
        Matched photo count and the comments/reactions taken from the file

    Raises:
        InvalidEnrichmentFile: Not JSON, wrong version or no photos mapping;
            no record is touched in that case
    """
    photos = load_enrichment(content)
    stats = GraphApiStats()

    for photo_id, photo_data in photos.items():
        position = identity.lookup(photo_id)
        if position is None or not isinstance(photo_data, dict):
            continue
        stats.matched += 1
        record = records[position]

        comments = photo_data.get("comments")
        if isinstance(comments, list) and comments:
            record.comments = [_to_comment(c) for c in comments if isinstance(c, dict)]
            stats.comments += len(record.comments)

        reactions = photo_data.get("reactions")
        if isinstance(reactions, list) and reactions:
            existing = {r.key for r in record.reactions}
            for item in reactions:
                if not isinstance(item, dict):
                    continue
                reaction = Reaction(
                    author_name=item.get("from_name") or "Unknown",
                    reaction_type=item.get("type") or "LIKE",
                    timestamp=utc_now(),
                    stable_id=str(photo_id),
                )
                if reaction.key in existing:
                    continue
                record.reactions.append(reaction)
                existing.add(reaction.key)
                stats.reactions += 1

    logger.info(
        f"Graph API: matched {stats.matched} photo(s), "
        f"{stats.comments} comment(s), {stats.reactions} new reaction(s)"
    )
    return stats
