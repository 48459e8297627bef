#!/usr/bin/env python3
"""
Import Configuration Module

Centralized settings for the Facebook importer: archive layout conventions,
matching constants and the job API connection read from the environment.
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from common.utils import parse_bool_env


# Items uploaded between user confirmations
BATCH_SIZE = 50

# Widest gap allowed between a media timestamp and a later annotation
MAX_MATCH_GAP = timedelta(days=7)

# Substrings (lower-cased, spaces as underscores) naming the activity root
ACTIVITY_ROOT_MARKERS = ("facebook_activity", "your_activity")

# Folders whose presence marks a directory as the data root
DATA_ROOT_DIRS = ("posts/", "photos_and_videos/")

# Conventional media directories tried for bare filenames, in order
MEDIA_LOOKUP_DIRS = ("posts/media/", "photos_and_videos/", "photos_and_videos/album/")

# Directories scanned for media no document references
UNTAGGED_MEDIA_DIRS = ("photos_and_videos/", "stories/", "posts/media/", "photos/")

# Directory names that are layout, not albums
NON_ALBUM_DIRS = frozenset(
    {"media", "posts", "your_facebook_activity", "photos_and_videos"}
)

# Layout folders ignored when naming albums for untagged media
UNTAGGED_LAYOUT_DIRS = NON_ALBUM_DIRS | {"album", "photos"}

# Sticker and GIF asset folders shipped inside exports
ASSET_DIRS = ("stickers_used", "gifs")

# Label for items without an album in the job's album map
DEFAULT_ALBUM_KEY = "__default__"

# HTML caption pages parsed by the markup extractor, relative to posts/
CAPTION_PAGES = (
    "your_posts__check_ins__photos_and_videos_1.html",
    "your_uncategorized_photos.html",
    "your_photos.html",
    "your_videos.html",
)


@dataclass
class ImportSettings:
    """Connection settings for the import job API"""

    api_url: Optional[str] = None
    access_token: Optional[str] = None
    timeout: float = 120.0
    skip_pauses: bool = False

    @classmethod
    def from_env(cls) -> "ImportSettings":
        """Build settings from FB_IMPORT_* environment variables

        Example:
            >>> os.environ["FB_IMPORT_API_URL"] = "https://example.test/import"
            >>> ImportSettings.from_env().api_url
            'https://example.test/import'
        """
        timeout_raw = os.environ.get("FB_IMPORT_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else 120.0
        except ValueError:
            raise ValueError(f"FB_IMPORT_TIMEOUT must be a number, got {timeout_raw!r}")

        return cls(
            api_url=os.environ.get("FB_IMPORT_API_URL") or None,
            access_token=os.environ.get("FB_IMPORT_TOKEN") or None,
            timeout=timeout,
            skip_pauses=parse_bool_env(os.environ.get("FB_IMPORT_SKIP_PAUSES", "")),
        )

    def is_complete(self) -> bool:
        """True when both the API URL and the bearer token are set"""
        return bool(self.api_url and self.access_token)
