#!/usr/bin/env python3
"""
Front/back pairing of scanned photos

Printed photos scanned on both sides end up as two separate images. The user
pairs them with two selections: first the front, then the back. Selecting the
front again cancels. Positions already in a pair cannot be selected until the
pair is removed, and videos never take part.
"""

import logging
from typing import Dict, Optional, Sequence

from common.exceptions import PairingError
from processors.facebook.models import MediaRecord

logger = logging.getLogger(__name__)


class PairingModel:
    def __init__(self, records: Sequence[MediaRecord]):
        self.records = records
        self._pairs: Dict[int, int] = {}
        self._selection: Optional[int] = None

    @property
    def pairs(self) -> Dict[int, int]:
        """Front position -> back position"""
        return dict(self._pairs)

    @property
    def selection(self) -> Optional[int]:
        """Front position waiting for its back, or None when idle"""
        return self._selection

    def is_front(self, position: int) -> bool:
        return position in self._pairs

    def is_back(self, position: int) -> bool:
        return position in self._pairs.values()

    def back_of(self, front: int) -> Optional[int]:
        return self._pairs.get(front)

    def front_of(self, back: int) -> Optional[int]:
        for front, paired_back in self._pairs.items():
            if paired_back == back:
                return front
        return None

    def is_selectable(self, position: int) -> bool:
        if not 0 <= position < len(self.records):
            return False
        if self.records[position].is_video:
            return False
        return not (self.is_front(position) or self.is_back(position))

    def select(self, position: int) -> Optional[tuple]:
        """Advance the two-step selection.

        Returns:
            The (front, back) pair when this selection completed one, else None

        Raises:
            PairingError: Position is out of range, a video or already paired
        """
        if not 0 <= position < len(self.records):
            raise PairingError(f"No media at position {position}")
        if self.records[position].is_video:
            raise PairingError(f"Position {position} is a video and cannot be paired")
        if self.is_front(position) or self.is_back(position):
            raise PairingError(f"Position {position} is already paired")

        if self._selection is None:
            self._selection = position
            return None

        front = self._selection
        self._selection = None
        if front == position:
            logger.debug(f"Selection of {position} cancelled")
            return None

        self._pairs[front] = position
        logger.debug(f"Paired front {front} with back {position}")
        return (front, position)

    def unpair(self, front: int) -> Optional[int]:
        """Remove the pair whose front is given and return its back"""
        back = self._pairs.pop(front, None)
        if back is not None:
            logger.debug(f"Unpaired front {front} from back {back}")
        return back
