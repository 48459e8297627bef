#!/usr/bin/env python3
"""
Deduplication of media records by source identity

The same file can be reached through several documents (an album and a post,
or a post and the untagged scan). The first record seen for an identity is
kept; later ones only fill its gaps.
"""

import logging
from typing import Dict, Iterable, List

from processors.facebook.models import MediaRecord

logger = logging.getLogger(__name__)


class AssetRegistry:
    """Ordered set of unique MediaRecords keyed by source identity

    Example:
        >>> registry = AssetRegistry()
        >>> registry.register(first)
        >>> registry.register(duplicate_of_first)
        >>> len(registry)
        1
    """

    def __init__(self):
        self._by_source_id: Dict[str, MediaRecord] = {}
        self.duplicates = 0

    def register(self, record: MediaRecord) -> MediaRecord:
        """Add a record or fold it into the one already registered.

        Returns:
            The record that now represents this identity
        """
        existing = self._by_source_id.get(record.source_id)
        if existing is None:
            self._by_source_id[record.source_id] = record
            return record

        self.duplicates += 1
        if not existing.album_name and record.album_name:
            existing.album_name = record.album_name
        if not existing.description and record.description:
            existing.description = record.description
        if len(record.comments) > len(existing.comments):
            existing.comments = list(record.comments)
        if len(record.reactions) > len(existing.reactions):
            existing.reactions = list(record.reactions)

        logger.debug(f"Merged duplicate {record.source_id}")
        return existing

    def records(self) -> List[MediaRecord]:
        """Unique records in first-arrival order"""
        return list(self._by_source_id.values())

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._by_source_id

    def __len__(self) -> int:
        return len(self._by_source_id)


def merge_records(records: Iterable[MediaRecord]) -> List[MediaRecord]:
    registry = AssetRegistry()
    for record in records:
        registry.register(record)
    if registry.duplicates:
        logger.info(f"Merged {registry.duplicates} duplicate record(s)")
    return registry.records()
