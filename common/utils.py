#!/usr/bin/env python3
"""
Common utility functions for the importer
"""

import posixpath
from typing import Optional


# ============================================================================
# Media Type Detection
# ============================================================================

# Supported media extensions
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}
VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v"}
ALL_MEDIA_EXTENSIONS = IMAGE_EXTENSIONS | VIDEO_EXTENSIONS

# Extension to MIME type used for upload payloads
EXTENSION_TO_MIME = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".m4v": "video/x-m4v",
}


def get_extension(path: str) -> str:
    """Lower-cased extension (with dot) of an archive path or filename"""
    return posixpath.splitext(path)[1].lower()


def get_media_kind(path: str) -> Optional[str]:
    """Determine media kind from file extension

    Args:
        path: Archive path or filename

    Returns:
        "photo" if image file, "video" if video file, None if unsupported

    Example:
        >>> get_media_kind("photos_and_videos/album/123.jpg")
        'photo'
        >>> get_media_kind("posts/media/clip.MOV")
        'video'
        >>> get_media_kind("index.html")
    """
    ext = get_extension(path)

    if ext in IMAGE_EXTENSIONS:
        return "photo"
    elif ext in VIDEO_EXTENSIONS:
        return "video"
    else:
        return None


def is_supported_media(path: str) -> bool:
    """Check if an archive path names a supported image or video"""
    return get_extension(path) in ALL_MEDIA_EXTENSIONS


def guess_mime_type(filename: str, media_kind: Optional[str] = None) -> str:
    """MIME type for an upload payload, falling back on the media kind

    Example:
        >>> guess_mime_type("clip.mov")
        'video/quicktime'
        >>> guess_mime_type("noext", "video")
        'video/mp4'
    """
    mime = EXTENSION_TO_MIME.get(get_extension(filename))
    if mime:
        return mime
    return "video/mp4" if media_kind == "video" else "image/jpeg"


# ============================================================================
# Archive Path Helpers
# ============================================================================


def basename(path: str) -> str:
    """Last component of a slash-separated archive path"""
    return path.rsplit("/", 1)[-1]


def parent_dir_name(path: str) -> Optional[str]:
    """Name of the directory directly containing an archive path

    Example:
        >>> parent_dir_name("posts/media/Summer/1.jpg")
        'Summer'
        >>> parent_dir_name("1.jpg")
    """
    parts = path.split("/")
    if len(parts) < 2 or not parts[-2]:
        return None
    return parts[-2]


def filename_stem(filename: str) -> str:
    """Filename without its final extension"""
    return posixpath.splitext(filename)[0]


def parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable string.

    Args:
        value: String value from environment variable

    Returns:
        True if value is truthy ("true", "1", "yes", "on"), False otherwise

    Example:
        >>> parse_bool_env("true")
        True
        >>> parse_bool_env("false")
        False
    """
    return value.lower() in ("true", "1", "yes", "on")
