#!/usr/bin/env python3
"""
Shape detection for Facebook JSON documents

The posts/ folder mixes three document shapes across export vintages:

    album                  {"name": ..., "photos": [{uri, creation_timestamp, ...}]}
    uncategorized media    {"other_photos_v2": [...]} or {"videos_v2": [...]}
    posts                  [{"timestamp": ..., "data": [{"post": ...}],
                             "attachments": [{"data": [{"media": {...}}]}]}]

classify_document turns a parsed payload into one typed variant so the
extractor never repeats field-presence checks.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class MediaItem:
    """One media reference inside a document, before resolution"""

    uri: Optional[str]
    creation_timestamp: Any = None
    title: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "MediaItem":
        photo_metadata = (data.get("media_metadata") or {}).get("photo_metadata") or {}
        return cls(
            uri=_as_text(data.get("uri")),
            creation_timestamp=data.get("creation_timestamp"),
            title=_as_text(data.get("title")),
            description=_as_text(data.get("description")),
            latitude=_as_float(photo_metadata.get("latitude")),
            longitude=_as_float(photo_metadata.get("longitude")),
        )


@dataclass
class AlbumDocument:
    name: Optional[str]
    description: Optional[str]
    items: List[MediaItem] = field(default_factory=list)


@dataclass
class MediaCollectionDocument:
    items: List[MediaItem] = field(default_factory=list)
    force_video: bool = False


@dataclass
class Post:
    timestamp: Any
    text: Optional[str]
    items: List[MediaItem] = field(default_factory=list)


@dataclass
class PostsDocument:
    posts: List[Post] = field(default_factory=list)


Document = Union[AlbumDocument, MediaCollectionDocument, PostsDocument]


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


def _items(raw) -> List[MediaItem]:
    return [MediaItem.from_json(item) for item in raw or [] if isinstance(item, dict)]


def _parse_post(raw: Dict[str, Any]) -> Post:
    data = raw.get("data") or []
    text = None
    if data and isinstance(data[0], dict):
        text = _as_text(data[0].get("post"))

    items: List[MediaItem] = []
    for attachment in raw.get("attachments") or []:
        if not isinstance(attachment, dict):
            continue
        for entry in attachment.get("data") or []:
            media = entry.get("media") if isinstance(entry, dict) else None
            if isinstance(media, dict) and media.get("uri"):
                items.append(MediaItem.from_json(media))
    return Post(timestamp=raw.get("timestamp"), text=text, items=items)


def classify_document(payload: Any) -> Optional[Document]:
    """Detect a document's shape.

    Args:
        payload: Parsed JSON value

    Returns:
        AlbumDocument, MediaCollectionDocument, PostsDocument, or None when
        the document is none of them
    """
    if isinstance(payload, list):
        return PostsDocument(
            posts=[_parse_post(post) for post in payload if isinstance(post, dict)]
        )

    if not isinstance(payload, dict):
        return None

    if isinstance(payload.get("photos"), list):
        return AlbumDocument(
            name=_as_text(payload.get("name")),
            description=_as_text(payload.get("description")),
            items=_items(payload["photos"]),
        )

    if isinstance(payload.get("other_photos_v2"), list):
        return MediaCollectionDocument(items=_items(payload["other_photos_v2"]))

    if isinstance(payload.get("videos_v2"), list):
        return MediaCollectionDocument(items=_items(payload["videos_v2"]), force_video=True)

    return None
