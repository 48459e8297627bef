#!/usr/bin/env python3
"""
Archive access, data-root location and media reference resolution

Facebook exports come wrapped in a varying number of folders
("facebook-jane-2024/your_facebook_activity/posts/...", or just "posts/...").
find_root_prefix works out where the export content starts using entry names
only, and resolve_media_path turns the loose URIs found in JSON/HTML into real
archive entries.
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import Any, Iterable, List, Optional

from common.exceptions import ArchiveError
from common.import_config import ACTIVITY_ROOT_MARKERS, DATA_ROOT_DIRS, MEDIA_LOOKUP_DIRS
from common.utils import basename

logger = logging.getLogger(__name__)


class ArchiveIndex:
    """Read-only view over a zip archive's file entries"""

    def __init__(self, archive: zipfile.ZipFile, archive_path: Optional[str] = None):
        self.archive = archive
        self.archive_path = archive_path
        # Directory entries are left out; many zips do not contain them at all
        self.names: List[str] = [
            info.filename for info in archive.infolist() if not info.is_dir()
        ]
        self._name_set = set(self.names)

    @classmethod
    def open(cls, archive_path) -> "ArchiveIndex":
        """Open a zip file from disk.

        Raises:
            ArchiveError: If the file is missing, not a zip, or corrupt
        """
        path = Path(archive_path)
        if not path.exists():
            raise ArchiveError(f"Archive not found: {path}", str(path))
        try:
            archive = zipfile.ZipFile(path)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise ArchiveError(f"Failed to open the export archive: {e}", str(path))
        return cls(archive, str(path))

    def close(self) -> None:
        self.archive.close()

    def __enter__(self) -> "ArchiveIndex":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __contains__(self, name: str) -> bool:
        return name in self._name_set

    def __len__(self) -> int:
        return len(self.names)

    def read_bytes(self, name: str) -> bytes:
        return self.archive.read(name)

    def read_text(self, name: str) -> str:
        return self.archive.read(name).decode("utf-8")

    def read_json(self, name: str) -> Any:
        return json.loads(self.read_text(name))

    def names_under(self, prefix: str, suffix: str = "") -> List[str]:
        """File entries starting with prefix and ending with suffix"""
        suffix = suffix.lower()
        return [
            n for n in self.names if n.startswith(prefix) and n.lower().endswith(suffix)
        ]


def find_root_prefix(names: Iterable[str]) -> str:
    """Locate the directory under which the export content lives.

    Rules, strongest first:
      1. a second-level directory whose name marks the activity root
         (e.g. "your_facebook_activity"),
      2. a second-level directory holding posts/ or photos_and_videos/,
      3. the single top-level wrapper directory shared by every entry,
      4. the archive root.

    Args:
        names: File entry paths of the archive

    Returns:
        Prefix ending in "/", or "" for the archive root

    Example:
        >>> find_root_prefix(["jane/your_facebook_activity/posts/a.json"])
        'jane/your_facebook_activity/'
        >>> find_root_prefix(["posts/a.json", "photos_and_videos/b.jpg"])
        ''
    """
    paths = list(names)
    if not paths:
        return ""

    top_dirs = {p.split("/", 1)[0] for p in paths}
    prefix = ""
    if len(top_dirs) == 1 and all("/" in p for p in paths):
        wrapper = next(iter(top_dirs)) + "/"
        # An export holding only posts/ has no wrapper at all
        if wrapper not in DATA_ROOT_DIRS:
            prefix = wrapper

    second_level = set()
    for p in paths:
        relative = p[len(prefix):]
        slash = relative.find("/")
        if slash > 0:
            second_level.add(relative[:slash])
    candidates = sorted(second_level)

    for directory in candidates:
        normalized = directory.lower().replace(" ", "_")
        if any(marker in normalized for marker in ACTIVITY_ROOT_MARKERS):
            logger.debug(f"Found activity root: {prefix}{directory}/")
            return f"{prefix}{directory}/"

    for directory in candidates:
        test_prefix = f"{prefix}{directory}/"
        if any(
            p.startswith(test_prefix + data_dir) for p in paths for data_dir in DATA_ROOT_DIRS
        ):
            logger.debug(f"Found data root via data folders: {test_prefix}")
            return test_prefix

    logger.debug(f"Using root prefix {prefix or '(root)'}")
    return prefix


def resolve_media_path(index: ArchiveIndex, prefix: str, uri: Optional[str]) -> Optional[str]:
    """Resolve a media URI from the export to an archive entry.

    Tries, first match wins: the URI under the located prefix, the bare URI,
    the URI under the outer wrapper only (when the prefix is two folders
    deep), and the filename inside each conventional media directory.

    Returns:
        Archive entry path, or None if nothing matches
    """
    if not uri:
        return None

    candidates = [f"{prefix}{uri}", uri]

    parts = [p for p in prefix.split("/") if p]
    if len(parts) >= 2:
        candidates.append(f"{parts[0]}/{uri}")

    filename = basename(uri)
    if filename:
        candidates.extend(f"{prefix}{d}{filename}" for d in MEDIA_LOOKUP_DIRS)

    for candidate in candidates:
        if candidate in index:
            return candidate

    logger.debug(f"Could not resolve media reference: {uri}")
    return None
