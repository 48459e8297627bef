#!/usr/bin/env python3
"""
Unified progress bar utilities for consistent UX across import phases.

Provides standardized progress bar formatting with phase prefixes to clearly
indicate which stage of the import is active.
"""

from typing import Iterable, Optional, TypeVar

from tqdm import tqdm

# Phase constants for consistent naming
PHASE_EXTRACT = "Extract"
PHASE_ANNOTATE = "Annotate"
PHASE_UPLOAD = "Upload"

T = TypeVar("T")


def progress_bar(
    iterable: Iterable[T],
    phase: str,
    action: str,
    total: Optional[int] = None,
    unit: str = "file",
    disable: Optional[bool] = None,
) -> tqdm:
    """Wrap iterable with standardized progress bar.

    Args:
        iterable: The iterable to wrap
        phase: Phase name (use PHASE_* constants)
        action: Action description (e.g., "Reading posts")
        total: Total count if known
        unit: Unit name for display
        disable: Passed to tqdm; None hides the bar when not on a TTY

    Returns:
        tqdm progress bar wrapping the iterable
    """
    return tqdm(
        iterable,
        desc=f"[{phase}] {action}",
        total=total,
        unit=unit,
        disable=disable,
        leave=False,
    )


def upload_bar(total: int, disable: Optional[bool] = None) -> tqdm:
    """Manually advanced progress bar for the upload phase.

    Args:
        total: Number of items that will be uploaded
        disable: Passed to tqdm; None hides the bar when not on a TTY

    Returns:
        tqdm bar; call update(1) per processed item
    """
    return tqdm(
        total=total,
        desc=f"[{PHASE_UPLOAD}] Uploading media",
        unit="item",
        disable=disable,
    )
