#!/usr/bin/env python3
"""
Banned Files Filter

Provides filtering logic to skip archive entries that are not user content:
sticker and GIF asset folders shipped inside Facebook exports, plus the
system files that zip tools on macOS and NAS devices leave behind.
"""

from typing import List, Optional

from common.import_config import ASSET_DIRS


class BannedFilesFilter:
    """Filter for banned archive entries that should be skipped during extraction"""

    # Banned files and directories to skip during extraction
    BANNED_PATTERNS = [
        *ASSET_DIRS,  # Facebook sticker/GIF assets
        "__MACOSX",  # macOS zip metadata directory
        "@eaDir",  # QNAP NAS system directory
        ".DS_Store",  # macOS custom attributes file
    ]

    # Banned name prefixes
    BANNED_PREFIXES = [
        "._",  # macOS resource fork files (AppleDouble format)
    ]

    def __init__(self, additional_patterns: Optional[List[str]] = None):
        """
        Initialize the filter with optional additional patterns

        Args:
            additional_patterns: Optional list of additional patterns to ban
        """
        self.patterns = self.BANNED_PATTERNS.copy()
        if additional_patterns:
            self.patterns.extend(additional_patterns)

    def is_banned_name(self, name: str) -> bool:
        """Check a single path component against the banned patterns"""
        name = name.lower()
        if any(name.startswith(prefix) for prefix in self.BANNED_PREFIXES):
            return True
        return any(name == pattern.lower() for pattern in self.patterns)

    def is_banned(self, entry_path: str) -> bool:
        """
        Check if an archive entry should be skipped

        Any banned component (directory or file name) bans the whole entry.

        Args:
            entry_path: Slash-separated archive path or media URI

        Returns:
            True if the path matches any banned pattern, False otherwise
        """
        return any(
            self.is_banned_name(part) for part in entry_path.split("/") if part
        )

