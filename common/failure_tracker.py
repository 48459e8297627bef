#!/usr/bin/env python3
"""
Failure Tracker Module

Tracks best-effort losses during an import including:
- Skipped documents (malformed JSON/HTML that extraction stepped over)
- Unresolved references (metadata pointing at media missing from the archive)
- Unmatched annotations (comments/reactions no media record accepted)
- Upload failures (items the job API rejected or never answered)

None of these abort an import. They are collected so the final summary and
the optional JSON report can show what was left behind.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class FailureTracker:
    """
    Tracks failures during extraction, matching and upload.

    Generates a JSON report of everything the import skipped.
    """

    def __init__(self, archive_path: str):
        """
        Initialize failure tracker.

        Args:
            archive_path: Path to the export archive being imported
        """
        self.archive_path = archive_path
        self.timestamp = datetime.now().isoformat()

        self.skipped_documents: List[Dict[str, Any]] = []
        self.unresolved_references: List[Dict[str, Any]] = []
        self.unmatched_annotations: Dict[str, int] = {"comments": 0, "reactions": 0}
        self.upload_failures: List[Dict[str, Any]] = []

    def add_skipped_document(self, entry_path: str, reason: str) -> None:
        """
        Track an archive document that could not be parsed.

        Args:
            entry_path: Archive path of the document
            reason: Human-readable reason (usually the exception text)
        """
        self.skipped_documents.append({"entry_path": entry_path, "reason": reason})
        logger.debug(f"Tracked skipped document: {entry_path}")

    def add_unresolved_reference(
        self,
        uri: str,
        document: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Track a media reference that matched no archive entry.

        Args:
            uri: The reference as written in the document
            document: Archive path of the referencing document
            context: Additional context information
        """
        self.unresolved_references.append(
            {"uri": uri, "document": document, "context": context or {}}
        )
        logger.debug(f"Tracked unresolved reference: {uri}")

    def add_unmatched_annotation(self, kind: str) -> None:
        """
        Count a comment or reaction that was dropped for lack of a match.

        Args:
            kind: "comments" or "reactions"
        """
        self.unmatched_annotations[kind] = self.unmatched_annotations.get(kind, 0) + 1

    def add_upload_failure(
        self,
        source_id: str,
        filename: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Track a media item that failed to upload.

        Args:
            source_id: Source identity of the record
            filename: Original filename
            reason: Error returned by the API or the transport
            context: Additional context information
        """
        self.upload_failures.append(
            {
                "source_id": source_id,
                "filename": filename,
                "reason": reason,
                "context": context or {},
            }
        )
        logger.debug(f"Tracked upload failure: {filename}")

    def has_failures(self) -> bool:
        """Check if any failures have been tracked."""
        return bool(
            self.skipped_documents
            or self.unresolved_references
            or any(self.unmatched_annotations.values())
            or self.upload_failures
        )

    def get_summary(self) -> Dict[str, int]:
        """
        Get summary statistics of tracked failures.

        Returns:
            Dict with counts of each failure type
        """
        return {
            "skipped_documents": len(self.skipped_documents),
            "unresolved_references": len(self.unresolved_references),
            "unmatched_comments": self.unmatched_annotations.get("comments", 0),
            "unmatched_reactions": self.unmatched_annotations.get("reactions", 0),
            "failed_uploads": len(self.upload_failures),
        }

    def generate_report(self) -> Dict[str, Any]:
        """
        Generate a comprehensive failure report.

        Returns:
            Dict containing all failure information
        """
        return {
            "archive": self.archive_path,
            "timestamp": self.timestamp,
            "summary": self.get_summary(),
            "skipped_documents": self.skipped_documents,
            "unresolved_references": self.unresolved_references,
            "failed_uploads": self.upload_failures,
        }

    def save_report(self, report_path: Path) -> bool:
        """
        Save the failure report to a JSON file.

        Args:
            report_path: Destination file

        Returns:
            True if a report was written, False if there was nothing to report
            or the write failed
        """
        if not self.has_failures():
            logger.info("No failures to report")
            return False

        report_path = Path(report_path)
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            with open(report_path, "w", encoding="utf-8") as f:
                json.dump(self.generate_report(), f, indent=2, ensure_ascii=False)
            logger.info(f"Failure report saved to: {report_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to save failure report to {report_path}: {e}")
            return False
