"""
Test export generator functions.

These functions create minimal but valid Facebook export archives (zip files)
in the layouts the importer supports. Used by fixtures to create test data.
"""

import json
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tests.fixtures.media_samples import media_bytes_for

# Wrapper + activity root used by current exports
DEFAULT_ROOT = "facebook-testuser/your_facebook_activity/"


def fb_encode(text: str) -> str:
    """Mangle text the way Facebook exports do (UTF-8 bytes read as Latin-1)"""
    return text.encode("utf-8").decode("latin-1")


def build_zip(zip_path: Path, entries: Dict[str, Any]) -> Path:
    """Write a zip archive from a mapping of entry path -> content.

    Content may be bytes, str, or any JSON-serialisable value. None writes
    minimal media bytes chosen by the entry's extension.

    Args:
        zip_path: Destination archive
        entries: Archive entry paths and their content

    Returns:
        Path to the created archive
    """
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(zip_path, "w") as archive:
        for name, content in entries.items():
            if content is None:
                data = media_bytes_for(name)
            elif isinstance(content, bytes):
                data = content
            elif isinstance(content, str):
                data = content.encode("utf-8")
            else:
                data = json.dumps(content).encode("utf-8")
            archive.writestr(name, data)
    return zip_path


# ============================================================================
# Document builders
# ============================================================================


def photo_entry(
    uri: str,
    timestamp: Optional[int] = None,
    title: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Dict[str, Any]:
    """One media item as it appears in album/post documents"""
    entry: Dict[str, Any] = {"uri": uri}
    if timestamp is not None:
        entry["creation_timestamp"] = timestamp
    if title is not None:
        entry["title"] = title
    if latitude is not None:
        entry["media_metadata"] = {
            "photo_metadata": {"latitude": latitude, "longitude": longitude}
        }
    return entry


def album_json(
    name: str, photos: List[Dict[str, Any]], description: Optional[str] = None
) -> Dict[str, Any]:
    album: Dict[str, Any] = {"name": name, "photos": photos}
    if description is not None:
        album["description"] = description
    return album


def posts_json(posts: Iterable[Tuple[int, Optional[str], List[str]]]) -> List[Dict[str, Any]]:
    """Timeline posts from (timestamp, text, media uris) tuples"""
    documents = []
    for timestamp, text, uris in posts:
        post: Dict[str, Any] = {
            "timestamp": timestamp,
            "attachments": [{"data": [{"media": {"uri": uri}} for uri in uris]}],
        }
        if text is not None:
            post["data"] = [{"post": text}]
        documents.append(post)
    return documents


def comments_json(comments: Iterable[Tuple[str, str, int]]) -> Dict[str, Any]:
    """comments_v2 document from (author, text, timestamp) tuples"""
    return {
        "comments_v2": [
            {
                "timestamp": timestamp,
                "data": [
                    {"comment": {"timestamp": timestamp, "comment": text, "author": author}}
                ],
            }
            for author, text, timestamp in comments
        ]
    }


def nested_reactions_json(reactions: Iterable[Tuple[str, str, int]]) -> Dict[str, Any]:
    """Older reactions document from (actor, type, timestamp) tuples"""
    return {
        "reactions_v2": [
            {
                "timestamp": timestamp,
                "data": [{"reaction": {"reaction": reaction, "actor": actor}}],
            }
            for actor, reaction, timestamp in reactions
        ]
    }


def flat_reactions_json(
    reactions: Iterable[Tuple[str, str, int, Optional[str]]]
) -> List[Dict[str, Any]]:
    """Newer reactions document from (name, type, timestamp, fbid) tuples"""
    documents = []
    for name, reaction, timestamp, fbid in reactions:
        entry: Dict[str, Any] = {
            "timestamp": timestamp,
            "label_values": [
                {"label": "Reaction", "value": reaction},
                {"label": "Name", "value": name},
            ],
        }
        if fbid is not None:
            entry["fbid"] = fbid
        documents.append(entry)
    return documents


def graph_api_json(photos: Dict[str, Dict[str, Any]], version: Any = 1) -> str:
    return json.dumps({"version": version, "photos": photos})


# ============================================================================
# Export generators
# ============================================================================


def create_facebook_export(
    base_path: Path,
    files: Dict[str, Any],
    root: str = DEFAULT_ROOT,
    archive_name: str = "facebook-testuser.zip",
) -> Path:
    """Create a Facebook export archive.

    Structure:
        {archive_name}
            {root}{relative path}   for every entry in files

    Args:
        base_path: Directory receiving the archive
        files: Paths relative to the data root and their content (see build_zip)
        root: Data root inside the archive ("" for a root-level export)
        archive_name: Zip filename

    Returns:
        Path to the created archive
    """
    entries = {f"{root}{name}": content for name, content in files.items()}
    return build_zip(base_path / archive_name, entries)


def create_minimal_facebook_export(
    base_path: Path,
    album_name: str = "Summer Trip",
    root: str = DEFAULT_ROOT,
) -> Path:
    """One JSON album with one undated photo and one comment that matches nothing.

    Structure:
        facebook-testuser/your_facebook_activity/
            posts/album/0.json
            posts/media/SummerTrip_1/beach.jpg
            comments_and_reactions/comments.json
    """
    uri = "your_facebook_activity/posts/media/SummerTrip_1/beach.jpg"
    files = {
        "posts/album/0.json": album_json(album_name, [photo_entry(uri)]),
        "posts/media/SummerTrip_1/beach.jpg": None,
        "comments_and_reactions/comments.json": comments_json(
            [("Jane Doe", "Lovely!", 1609459200)]
        ),
    }
    return create_facebook_export(base_path, files, root=root)


def create_facebook_html_export(
    base_path: Path,
    album_name: str = "Summer Trip",
    root: str = DEFAULT_ROOT,
) -> Path:
    """HTML-format export: one album page with two photos and a caption page.

    Structure:
        facebook-testuser/your_facebook_activity/
            posts/album/0.html
            posts/your_photos.html
            posts/media/SummerTrip_1/p1.jpg, p2.jpg
    """
    p1 = "your_facebook_activity/posts/media/SummerTrip_1/p1.jpg"
    p2 = "your_facebook_activity/posts/media/SummerTrip_1/p2.jpg"
    album_page = f"""<html><head><title>{album_name}</title></head><body>
<section class="_a6-g"><div><img src="{p1}"></div>
<div class="_a72d">Jan 01, 2021 12:00:00 PM</div></section>
<section class="_a6-g"><div><img src="{p2}"></div></section>
<section class="_a6-g"><div><img src="your_facebook_activity/stickers_used/s.png"></div></section>
</body></html>"""
    caption_page = f"""<html><body>
<section class="_a6-g"><div class="_3-95">Beach day</div><img src="{p1}"></section>
<section class="_a6-g"><div class="_3-95">Sunset</div><img src="{p2}">
<div class="_a6-q">Taken</div><div class="_a6-q">Dec 31, 2020 10:00:00 AM</div></section>
</body></html>"""
    files = {
        "posts/album/0.html": album_page,
        "posts/your_photos.html": caption_page,
        "posts/media/SummerTrip_1/p1.jpg": None,
        "posts/media/SummerTrip_1/p2.jpg": None,
        "stickers_used/s.png": None,
    }
    return create_facebook_export(base_path, files, root=root)
