#!/usr/bin/env python3
"""
Linking comments and reactions to media records

The export has no foreign keys from annotations to media in the common case.
Two matchers cover it:

- IdentityMatcher: media whose filename stem is all digits is named after its
  Facebook object id, so an annotation carrying that id matches exactly.
- TemporalMatcher: otherwise an annotation goes to the latest media posted at
  or before it, provided the gap is at most seven days.

Anything left unmatched is dropped.
"""

import bisect
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from common.failure_tracker import FailureTracker
from common.import_config import MAX_MATCH_GAP
from common.utils import filename_stem
from processors.facebook.models import AnnotationSet, MediaRecord

logger = logging.getLogger(__name__)


class IdentityMatcher:
    """Lookup from Facebook object id to record position"""

    def __init__(self, records: Sequence[MediaRecord]):
        self.positions: Dict[str, int] = {}
        for position, record in enumerate(records):
            stem = filename_stem(record.filename)
            if stem.isdigit():
                self.positions[stem] = position

    def lookup(self, stable_id: Optional[str]) -> Optional[int]:
        if not stable_id:
            return None
        return self.positions.get(str(stable_id))

    def __contains__(self, stable_id: str) -> bool:
        return stable_id in self.positions

    def __len__(self) -> int:
        return len(self.positions)


class TemporalMatcher:
    """Nearest-prior-timestamp lookup over records with a known time"""

    def __init__(self, records: Sequence[MediaRecord], max_gap: timedelta = MAX_MATCH_GAP):
        self.max_gap = max_gap
        dated = sorted(
            (record.created_at, position)
            for position, record in enumerate(records)
            if record.created_at is not None
        )
        self._times: List[datetime] = [time for time, _ in dated]
        self._positions: List[int] = [position for _, position in dated]

    def match(self, timestamp: datetime) -> Optional[int]:
        """Position of the latest record at or before timestamp, within max_gap"""
        if not self._times:
            return None
        best = bisect.bisect_right(self._times, timestamp) - 1
        if best < 0:
            return None
        if timestamp - self._times[best] > self.max_gap:
            return None
        return self._positions[best]


def attach_annotations(
    records: Sequence[MediaRecord],
    annotations: AnnotationSet,
    tracker: Optional[FailureTracker] = None,
) -> Dict[str, int]:
    """Append each comment and reaction to its matching record.

    Comments only match by time. Reactions try their object id first and fall
    back to time. A reaction whose (author, type) is already on the target
    record is skipped.

    Returns:
        Counts of matched, dropped and duplicate comments/reactions
    """
    identity = IdentityMatcher(records)
    temporal = TemporalMatcher(records)
    stats = {
        "comments": 0,
        "reactions": 0,
        "dropped_comments": 0,
        "dropped_reactions": 0,
        "duplicate_reactions": 0,
    }

    for comment in annotations.comments:
        position = temporal.match(comment.timestamp)
        if position is None:
            stats["dropped_comments"] += 1
            if tracker:
                tracker.add_unmatched_annotation("comments")
            continue
        records[position].comments.append(comment)
        stats["comments"] += 1

    for reaction in annotations.reactions:
        position = identity.lookup(reaction.stable_id)
        if position is None:
            position = temporal.match(reaction.timestamp)
        if position is None:
            stats["dropped_reactions"] += 1
            if tracker:
                tracker.add_unmatched_annotation("reactions")
            continue
        target = records[position]
        if any(existing.key == reaction.key for existing in target.reactions):
            stats["duplicate_reactions"] += 1
            continue
        target.reactions.append(reaction)
        stats["reactions"] += 1

    logger.info(
        f"Matched {stats['comments']} comment(s) and {stats['reactions']} reaction(s); "
        f"dropped {stats['dropped_comments']} comment(s) and "
        f"{stats['dropped_reactions']} reaction(s); "
        f"skipped {stats['duplicate_reactions']} duplicate reaction(s)"
    )
    return stats
