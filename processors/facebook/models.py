#!/usr/bin/env python3
"""
Data model for a parsed Facebook export

MediaRecord holds one photo/video with its payload and metadata; Comment and
Reaction are the social annotations matched onto it. ImportSummary is derived
from the final record set and never stored on its own.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from processors.facebook.text import to_iso


@dataclass
class Comment:
    author_name: str
    text: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "author_name": self.author_name,
            "text": self.text,
            "timestamp": to_iso(self.timestamp),
        }


@dataclass
class Reaction:
    author_name: str
    reaction_type: str
    timestamp: datetime
    # Facebook object id, only present in the newer reaction shape and in
    # Graph API enrichment files
    stable_id: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        """Two reactions with the same key are the same reaction"""
        return (self.author_name, self.reaction_type)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "author_name": self.author_name,
            "emoji": self.reaction_type,
            "timestamp": to_iso(self.timestamp),
        }
        if self.stable_id:
            data["fbid"] = self.stable_id
        return data


@dataclass
class MediaRecord:
    """One physical photo or video discovered in the archive"""

    payload: bytes
    filename: str
    source_id: str
    media_kind: str  # "photo" | "video"
    entry_path: Optional[str] = None
    created_at: Optional[datetime] = None
    description: Optional[str] = None
    album_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    comments: List[Comment] = field(default_factory=list)
    reactions: List[Reaction] = field(default_factory=list)

    @property
    def is_video(self) -> bool:
        return self.media_kind == "video"

    def to_metadata(self) -> Dict[str, Any]:
        """Metadata fields sent alongside the payload"""
        return {
            "source_asset_id": self.source_id,
            "filename": self.filename,
            "created_at": to_iso(self.created_at),
            "description": self.description,
            "media_type": self.media_kind,
            "album_name": self.album_name,
            "gps_lat": self.latitude,
            "gps_lng": self.longitude,
        }

    def __repr__(self) -> str:
        return (
            f"MediaRecord(source_id={self.source_id!r}, filename={self.filename!r}, "
            f"media_kind={self.media_kind!r}, album_name={self.album_name!r}, "
            f"bytes={len(self.payload)})"
        )


@dataclass
class AnnotationSet:
    """Comments and reactions pulled from the archive, not yet matched"""

    comments: List[Comment] = field(default_factory=list)
    reactions: List[Reaction] = field(default_factory=list)


@dataclass
class ImportSummary:
    photos: int = 0
    videos: int = 0
    stories: int = 0
    comments: int = 0
    reactions: int = 0
    albums: List[str] = field(default_factory=list)

    @classmethod
    def from_records(
        cls, records: Iterable[MediaRecord], annotations: AnnotationSet
    ) -> "ImportSummary":
        """Recompute counts from the deduplicated record set.

        Comment and reaction totals are what the archive held, matched or not.
        """
        records = list(records)
        albums: List[str] = []
        for record in records:
            if record.album_name and record.album_name not in albums:
                albums.append(record.album_name)
        return cls(
            photos=sum(1 for r in records if r.media_kind == "photo"),
            videos=sum(1 for r in records if r.media_kind == "video"),
            stories=sum(
                1 for r in records if r.entry_path and "/stories/" in f"/{r.entry_path}"
            ),
            comments=len(annotations.comments),
            reactions=len(annotations.reactions),
            albums=albums,
        )

    def apply_graph_stats(self, stats) -> None:
        """Fold Graph API merge counts into the running summary.

        Enrichment comments supersede the archive's, so the comment total is
        replaced; reactions only ever add.
        """
        self.comments = stats.comments
        self.reactions += stats.reactions

    def to_job_summary(self) -> Dict[str, int]:
        """Totals announced to the server when the job starts"""
        return {
            "total_photos": self.photos,
            "total_videos": self.videos,
            "total_stories": self.stories,
            "total_comments": self.comments,
            "total_reactions": self.reactions,
        }
