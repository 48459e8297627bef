#!/usr/bin/env python3
"""
Upload orchestration

Uploads the parsed records one at a time through the import job API. Every
BATCH_SIZE items the upload suspends and hands a BatchPause to whoever drives
it, resuming only once a BatchDecision is sent back:

    flow = orchestrator.upload()
    pause = next(flow)
    pause = flow.send(BatchDecision.CONTINUE)
    ...

run() wraps that loop for callers that just supply a decision function.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Generator, List, Optional, Sequence

from common.exceptions import ImportApiError
from common.failure_tracker import FailureTracker
from common.import_api import AssetUploadResult, ImportApiClient, ImportJob
from common.import_config import BATCH_SIZE, DEFAULT_ALBUM_KEY
from common.progress import upload_bar
from processors.facebook.models import AnnotationSet, ImportSummary, MediaRecord

logger = logging.getLogger(__name__)


def build_upload_order(count: int, pairs: Optional[Dict[int, int]] = None) -> List[int]:
    """Positions in upload order, each paired front followed by its back

    Example:
        >>> build_upload_order(4, {1: 3})
        [0, 1, 3, 2]
    """
    pairs = pairs or {}
    backs = set(pairs.values())
    order = []
    for position in range(count):
        if position in backs:
            continue
        order.append(position)
        back = pairs.get(position)
        if back is not None:
            order.append(back)
    return order


class BatchDecision(Enum):
    CONTINUE = "continue"
    CONTINUE_WITHOUT_PAUSES = "continue_without_pauses"
    STOP = "stop"


@dataclass
class BatchPause:
    """Yielded between batches; answered with a BatchDecision"""

    processed: int
    total: int
    next_batch: int


@dataclass
class UploadProgress:
    total: int = 0
    processed: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    paused: bool = False
    cancelled: bool = False

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.processed / self.total * 100)

    def estimate_remaining(self, elapsed: float) -> Optional[float]:
        """Seconds left, extrapolated from the average time per item so far"""
        if self.processed <= 0:
            return None
        return elapsed / self.processed * (self.total - self.processed)


class UploadOrchestrator:
    """Drives one import job from start to complete

    Args:
        client: Job API client
        records: Deduplicated records, indexed by position
        pairs: Front position -> back position
        batch_size: Items between pauses
        skip_pauses: Never pause
        tracker: Collects per-item upload failures
        summary: Totals announced at job start; derived from records if omitted
    """

    def __init__(
        self,
        client: ImportApiClient,
        records: Sequence[MediaRecord],
        pairs: Optional[Dict[int, int]] = None,
        batch_size: int = BATCH_SIZE,
        skip_pauses: bool = False,
        tracker: Optional[FailureTracker] = None,
        summary: Optional[ImportSummary] = None,
        clock: Callable[[], float] = time.monotonic,
        show_progress: Optional[bool] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.records = records
        self.pairs = dict(pairs or {})
        self.batch_size = batch_size
        self.skip_pauses = skip_pauses
        self.tracker = tracker
        self.summary = summary or ImportSummary.from_records(records, AnnotationSet())
        self.clock = clock
        self.show_progress = show_progress

        self.progress = UploadProgress(total=len(records))
        self.job: Optional[ImportJob] = None
        self._cancelled = False
        self._started_at: Optional[float] = None

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return self.clock() - self._started_at

    def estimate_remaining(self) -> Optional[float]:
        return self.progress.estimate_remaining(self.elapsed)

    def cancel(self) -> None:
        """Stop before the next item; calling it again has no effect"""
        if self._cancelled:
            return
        self._cancelled = True
        self.progress.cancelled = True
        logger.info("Upload cancelled; finishing after the current item")

    def upload(self) -> Generator[BatchPause, Optional[BatchDecision], UploadProgress]:
        """Run the job, yielding at every batch boundary.

        Returns:
            Final progress, as the generator's return value

        Raises:
            ImportJobError: Job could not be started or completed
        """
        order = build_upload_order(len(self.records), self.pairs)
        self.progress = UploadProgress(total=len(order), cancelled=self._cancelled)
        self._started_at = self.clock()

        self.job = self.client.start(self.summary.to_job_summary(), list(self.summary.albums))
        front_of = {back: front for front, back in self.pairs.items()}
        asset_ids: Dict[int, str] = {}

        disable = None if self.show_progress is None else not self.show_progress
        bar = upload_bar(len(order), disable=disable)
        try:
            for step, position in enumerate(order):
                if self._cancelled:
                    break

                if step > 0 and step % self.batch_size == 0 and not self.skip_pauses:
                    self.progress.paused = True
                    decision = yield BatchPause(
                        processed=self.progress.processed,
                        total=self.progress.total,
                        next_batch=min(self.batch_size, len(order) - step),
                    )
                    self.progress.paused = False
                    if decision is BatchDecision.STOP:
                        self.cancel()
                    elif decision is BatchDecision.CONTINUE_WITHOUT_PAUSES:
                        self.skip_pauses = True
                    if self._cancelled:
                        break

                self._upload_one(position, front_of, asset_ids)
                bar.update(1)
        finally:
            bar.close()

        self.client.complete(self.job.job_id)
        p = self.progress
        logger.info(
            f"Upload finished: {p.imported} imported, {p.skipped} skipped, "
            f"{p.failed} failed of {p.total}"
        )
        return p

    def run(self, decide: Callable[[BatchPause], BatchDecision]) -> UploadProgress:
        """Drive upload() to the end, asking decide() at every pause"""
        flow = self.upload()
        try:
            pause = next(flow)
            while True:
                pause = flow.send(decide(pause))
        except StopIteration as stop:
            return stop.value

    def _album_id(self, record: MediaRecord) -> Optional[str]:
        album_map = self.job.album_map
        if record.album_name and album_map.get(record.album_name):
            return album_map[record.album_name]
        return album_map.get(DEFAULT_ALBUM_KEY)

    def _upload_one(
        self, position: int, front_of: Dict[int, int], asset_ids: Dict[int, str]
    ) -> None:
        record = self.records[position]
        metadata = record.to_metadata()
        metadata.update(
            job_id=self.job.job_id,
            folder_id=self.job.folder_id,
            album_id=self._album_id(record),
        )
        if position in front_of:
            metadata["is_back_side"] = True
            front_asset_id = asset_ids.get(front_of[position])
            if front_asset_id:
                metadata["front_asset_id"] = front_asset_id

        try:
            result = self.client.upload_asset(
                record.filename, record.payload, metadata, record.media_kind
            )
        except ImportApiError as e:
            result = AssetUploadResult(success=False, error=str(e))

        self.progress.processed += 1
        if not result.success:
            self.progress.failed += 1
            logger.warning(f"Failed to upload {record.filename}: {result.error}")
            if self.tracker:
                self.tracker.add_upload_failure(
                    record.source_id, record.filename, result.error or "unknown error"
                )
            return

        if result.asset_id:
            asset_ids[position] = result.asset_id
            if record.comments or record.reactions:
                self.client.upload_batch(
                    result.asset_id,
                    [c.to_dict() for c in record.comments],
                    [r.to_dict() for r in record.reactions],
                )

        if result.skipped:
            self.progress.skipped += 1
            logger.debug(f"Server already had {record.filename}")
        else:
            self.progress.imported += 1
            logger.debug(f"Uploaded {record.filename} as {result.asset_id}")
