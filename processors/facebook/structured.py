#!/usr/bin/env python3
"""
Structured (JSON) extraction strategy

Reads every JSON document under posts/ and turns albums, uncategorized media
lists and post timelines into MediaRecords.
"""

import logging
from typing import List, Optional

from common.import_config import NON_ALBUM_DIRS
from common.progress import PHASE_EXTRACT, progress_bar
from common.utils import parent_dir_name
from processors.base import ExtractionContext, ExtractionStrategy
from processors.facebook.archive import resolve_media_path
from processors.facebook.media import load_record, should_skip_uri
from processors.facebook.models import MediaRecord
from processors.facebook.shapes import (
    AlbumDocument,
    MediaCollectionDocument,
    MediaItem,
    PostsDocument,
    classify_document,
)
from processors.facebook.text import decode_fb_string, epoch_to_datetime

logger = logging.getLogger(__name__)


def album_from_uri(uri: str) -> Optional[str]:
    """Album label implied by a media URI's folder, if it is not a layout folder

    Example:
        >>> album_from_uri("posts/media/Summer2019/1.jpg")
        'Summer2019'
        >>> album_from_uri("posts/media/1.jpg")
    """
    directory = parent_dir_name(uri)
    if not directory or directory in NON_ALBUM_DIRS:
        return None
    return decode_fb_string(directory)


class StructuredExtractor(ExtractionStrategy):
    """Extracts media from the JSON export"""

    @staticmethod
    def get_name() -> str:
        return "Structured JSON"

    def extract(self, context: ExtractionContext) -> List[MediaRecord]:
        records: List[MediaRecord] = []
        documents = context.index.names_under(f"{context.prefix}posts/", ".json")
        logger.info(f"Found {len(documents)} JSON post document(s)")

        for path in progress_bar(documents, PHASE_EXTRACT, "Reading JSON posts"):
            try:
                document = classify_document(context.index.read_json(path))
                if document is None:
                    logger.debug(f"Skipping {path}: not a post, album or media document")
                    continue

                if isinstance(document, AlbumDocument):
                    found = self._extract_album(context, path, document)
                elif isinstance(document, MediaCollectionDocument):
                    found = self._extract_collection(context, path, document)
                else:
                    found = self._extract_posts(context, path, document)
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to parse post file {path}: {e}")
                context.tracker.add_skipped_document(path, str(e))
                continue

            logger.debug(f"{path}: {len(found)} record(s)")
            records.extend(found)

        logger.info(f"Extracted {len(records)} record(s) from JSON")
        return records

    def _load_item(
        self,
        context: ExtractionContext,
        document_path: str,
        item: MediaItem,
        source_prefix: str,
        created_at=None,
        description: Optional[str] = None,
        album_name: Optional[str] = None,
        force_video: bool = False,
    ) -> Optional[MediaRecord]:
        uri = item.uri
        if not uri or should_skip_uri(uri):
            return None

        entry_path = resolve_media_path(context.index, context.prefix, uri)
        if entry_path is None:
            context.tracker.add_unresolved_reference(uri, document_path)
            return None

        return load_record(
            context,
            entry_path,
            source_id=f"{source_prefix}_{uri}",
            filename=uri.rsplit("/", 1)[-1] or None,
            force_video=force_video,
            created_at=epoch_to_datetime(created_at),
            description=description or None,
            album_name=album_name,
            latitude=item.latitude,
            longitude=item.longitude,
        )

    def _extract_album(
        self, context: ExtractionContext, path: str, document: AlbumDocument
    ) -> List[MediaRecord]:
        album_name = decode_fb_string(document.name) or None
        records = []
        for item in document.items:
            record = self._load_item(
                context,
                path,
                item,
                "fb_album",
                created_at=item.creation_timestamp,
                description=decode_fb_string(item.title or document.description),
                album_name=album_name,
            )
            if record:
                records.append(record)
        return records

    def _extract_collection(
        self, context: ExtractionContext, path: str, document: MediaCollectionDocument
    ) -> List[MediaRecord]:
        records = []
        for item in document.items:
            record = self._load_item(
                context,
                path,
                item,
                "fb_media",
                created_at=item.creation_timestamp,
                description=decode_fb_string(item.description),
                force_video=document.force_video,
            )
            if record:
                records.append(record)
        return records

    def _extract_posts(
        self, context: ExtractionContext, path: str, document: PostsDocument
    ) -> List[MediaRecord]:
        records = []
        for post in document.posts:
            post_text = decode_fb_string(post.text or "")
            for item in post.items:
                record = self._load_item(
                    context,
                    path,
                    item,
                    f"fb_post_{post.timestamp}",
                    created_at=post.timestamp,
                    description=post_text or decode_fb_string(item.title),
                    album_name=album_from_uri(item.uri),
                )
                if record:
                    records.append(record)
        return records
