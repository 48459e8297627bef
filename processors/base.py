#!/usr/bin/env python3
"""
Base classes for extraction strategies and processors

An ExtractionStrategy walks an opened archive and returns media records.
Several strategies can exist for one export format (structured JSON vs. HTML
fallback); the caller decides which ones run.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set

from common.failure_tracker import FailureTracker


@dataclass
class ExtractionContext:
    """Everything a strategy needs to read an archive

    Attributes:
        index: ArchiveIndex over the zip entries
        prefix: Located data root ("" for the archive root)
        tracker: Collects skipped documents and unresolved references
        consumed: Archive entries already turned into records; strategies add
            to it so the untagged-media scan can skip them
    """

    index: object
    prefix: str
    tracker: FailureTracker
    consumed: Set[str] = field(default_factory=set)


class ExtractionStrategy(ABC):
    """Base class for all extraction strategies"""

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Return human-readable strategy name"""
        pass

    @abstractmethod
    def extract(self, context: ExtractionContext) -> List:
        """Extract media records from the archive

        A malformed document must be logged, recorded on context.tracker and
        skipped; it never aborts the extraction.

        Args:
            context: Archive, data root and bookkeeping for this run

        Returns:
            List of MediaRecord in discovery order
        """
        pass


class ProcessorBase(ABC):
    """Base class for import processors"""

    @staticmethod
    @abstractmethod
    def detect(input_path: Path) -> bool:
        """Check if this processor can handle the input

        Args:
            input_path: Path to the export archive

        Returns:
            True if this processor can handle the input, False otherwise
        """
        pass

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Return human-readable processor name"""
        pass

    @staticmethod
    @abstractmethod
    def process(input_path: str, **kwargs) -> bool:
        """Parse the export and import it

        Args:
            input_path: Path to the export archive (as string)
            **kwargs: Additional arguments (settings, pairs, dry_run, ...)

        Returns:
            True if the import succeeded, False otherwise
        """
        pass
