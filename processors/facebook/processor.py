"""
Facebook Import Processor

This processor is designed to be used through fbimport.py.
It parses a Facebook "Download your information" archive, optionally merges a
Graph API enrichment file, and uploads the media with their comments and
reactions through the import job API.
"""

import logging
import signal
import zipfile
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from common.exceptions import FbImportError, PairingError
from common.failure_tracker import FailureTracker
from common.import_api import ImportApiClient
from common.import_config import ACTIVITY_ROOT_MARKERS, ImportSettings
from processors.base import ProcessorBase
from processors.facebook.models import MediaRecord
from processors.facebook.pairing import PairingModel
from processors.facebook.preprocess import (
    FacebookPreprocessor,
    ParsedExport,
    apply_enrichment,
)
from processors.facebook.uploader import (
    BatchDecision,
    BatchPause,
    UploadOrchestrator,
    UploadProgress,
)

# Set up logging
logger = logging.getLogger(__name__)

# Folder names that only appear in Facebook exports
EXPORT_MARKERS = ("posts/", "photos_and_videos/", "comments_and_reactions/", "likes_and_reactions/")

PROMPT_CHOICES = {
    "c": BatchDecision.CONTINUE,
    "a": BatchDecision.CONTINUE_WITHOUT_PAUSES,
    "s": BatchDecision.STOP,
}


# ============================================================================
# Processor Detection and Registration (for fbimport.py)
# ============================================================================


def detect(input_path: Path) -> bool:
    """Check if the input is a Facebook export archive

    Detection criteria:
    - Input is a readable zip file
    - Some entry sits under posts/, photos_and_videos/, comments_and_reactions/
      or likes_and_reactions/, or under an activity root folder

    Args:
        input_path: Path to the archive

    Returns:
        True if this is a Facebook export, False otherwise
    """
    try:
        if not zipfile.is_zipfile(input_path):
            return False
        with zipfile.ZipFile(input_path) as archive:
            for name in archive.namelist():
                normalized = f"/{name.lower()}"
                if any(f"/{marker}" in normalized for marker in EXPORT_MARKERS):
                    return True
                if any(marker in normalized for marker in ACTIVITY_ROOT_MARKERS):
                    return True
        return False
    except (OSError, zipfile.BadZipFile) as e:
        logger.debug(f"Detection failed for {input_path}: {e}")
        return False


class FacebookImportProcessor(ProcessorBase):
    """Processor for Facebook export archives"""

    @staticmethod
    def detect(input_path: Path) -> bool:
        """Check if this processor can handle the input"""
        return detect(input_path)

    @staticmethod
    def get_name() -> str:
        """Return processor name"""
        return "Facebook Export"

    @staticmethod
    def process(input_path: str, **kwargs) -> bool:
        """Parse and import a Facebook export

        Args:
            input_path: Path to the export archive
            **kwargs: settings (ImportSettings), graph_api (path), pairs
                (list of "FRONT:BACK" strings), dry_run, decide (pause
                callback), report (path), client (ImportApiClient)

        Returns:
            True if the import succeeded, False otherwise
        """
        tracker = FailureTracker(str(input_path))
        try:
            return process_logic(input_path, tracker=tracker, **kwargs)
        except FbImportError as e:
            logger.error(f"Error in FacebookImportProcessor: {e}")
            return False
        finally:
            report = kwargs.get("report")
            if report:
                tracker.save_report(Path(report))


def get_processor():
    """Return processor class for auto-discovery

    Returns:
        FacebookImportProcessor class (not instance, as it uses static methods)
    """
    return FacebookImportProcessor


# ============================================================================
# Helper Functions
# ============================================================================


def resolve_pair_token(records: List[MediaRecord], token: str) -> int:
    """Map a pair endpoint to a record position.

    A token made of digits is a position as listed by --dry-run; anything else
    must match exactly one record's filename.

    Raises:
        PairingError: Unknown or ambiguous token
    """
    token = token.strip()
    if token.isdigit():
        position = int(token)
        if position >= len(records):
            raise PairingError(f"No media at position {position}")
        return position

    matches = [i for i, record in enumerate(records) if record.filename == token]
    if not matches:
        raise PairingError(f"No media named {token!r}")
    if len(matches) > 1:
        raise PairingError(f"{token!r} matches {len(matches)} files; use a position")
    return matches[0]


def build_pairs(records: List[MediaRecord], pair_args: Iterable[str]) -> Dict[int, int]:
    """Apply "FRONT:BACK" arguments through the pairing state machine

    Raises:
        PairingError: Malformed pair, unknown media, video or reused position
    """
    model = PairingModel(records)
    for pair_arg in pair_args:
        front_token, sep, back_token = pair_arg.rpartition(":")
        if not sep or not front_token or not back_token:
            raise PairingError(f"Pair must look like FRONT:BACK, got {pair_arg!r}")
        front = resolve_pair_token(records, front_token)
        back = resolve_pair_token(records, back_token)
        if front == back:
            raise PairingError(f"Cannot pair {pair_arg!r} with itself")
        model.select(front)
        model.select(back)
    return model.pairs


def prompt_batch_decision(pause: BatchPause, input_fn: Callable[[str], str] = input) -> BatchDecision:
    """Ask on stdin how to continue after a batch"""
    print()
    print(f"Uploaded {pause.processed} of {pause.total}.")
    while True:
        answer = input_fn(
            f"[c] continue (next {pause.next_batch})  [a] continue without pauses  [s] stop: "
        )
        decision = PROMPT_CHOICES.get(answer.strip().lower()[:1])
        if decision is not None:
            return decision
        print("Please answer c, a or s.")


def print_summary(parsed: ParsedExport, pairs: Dict[int, int]) -> None:
    """Print what the archive contains"""
    summary = parsed.summary
    print("\n" + "=" * 70)
    print("FACEBOOK EXPORT SUMMARY")
    print("=" * 70)
    print(f"Photos:      {summary.photos:>6}")
    print(f"Videos:      {summary.videos:>6}")
    print(f"Stories:     {summary.stories:>6}")
    print(f"Comments:    {summary.comments:>6}")
    print(f"Reactions:   {summary.reactions:>6}")
    print(f"Albums:      {len(summary.albums):>6}")
    for album in summary.albums:
        print(f"  - {album}")
    if pairs:
        print(f"Front/back pairs: {len(pairs)}")
    print("=" * 70)


def print_records(records: List[MediaRecord]) -> None:
    for position, record in enumerate(records):
        album = record.album_name or "-"
        print(f"{position:>5}  {record.media_kind:<5}  {record.filename}  [{album}]")


def print_upload_result(progress: UploadProgress, elapsed: float) -> None:
    print("\n" + "=" * 70)
    print("IMPORT " + ("CANCELLED" if progress.cancelled else "COMPLETE"))
    print("=" * 70)
    print(f"Imported:    {progress.imported:>6}")
    print(f"Skipped:     {progress.skipped:>6}  (already in library)")
    print(f"Failed:      {progress.failed:>6}")
    print(f"Processed:   {progress.processed:>6} of {progress.total} ({progress.percent}%)")
    print(f"Elapsed:     {elapsed:>6.0f}s")
    print("=" * 70)


def _install_cancel_handler(orchestrator: UploadOrchestrator):
    """Route Ctrl-C to a cooperative cancel; returns the previous handler"""

    def handle_interrupt(signum, frame):
        print("\nStopping after the current item...")
        orchestrator.cancel()

    try:
        return signal.signal(signal.SIGINT, handle_interrupt)
    except ValueError:
        # Not on the main thread
        return None


def process_logic(
    input_path: str,
    tracker: Optional[FailureTracker] = None,
    settings: Optional[ImportSettings] = None,
    graph_api: Optional[str] = None,
    pairs: Optional[List[str]] = None,
    dry_run: bool = False,
    decide: Optional[Callable[[BatchPause], BatchDecision]] = None,
    client: Optional[ImportApiClient] = None,
    show_progress: Optional[bool] = None,
    **kwargs,
) -> bool:
    """Parse, enrich, pair and upload one archive

    Raises:
        FbImportError: Archive, enrichment, pairing or job failures
    """
    settings = settings or ImportSettings.from_env()
    parsed = FacebookPreprocessor(Path(input_path), tracker=tracker).parse()

    if graph_api:
        path = Path(graph_api)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read Graph API file {path}: {e}")
            return False
        stats = apply_enrichment(parsed, content)
        print(
            f"Graph API: matched {stats.matched} photo(s), "
            f"{stats.comments} comment(s), {stats.reactions} new reaction(s)"
        )

    pair_map = build_pairs(parsed.records, pairs or [])
    print_summary(parsed, pair_map)

    if dry_run:
        print_records(parsed.records)
        return True

    if client is None:
        if not settings.is_complete():
            logger.error(
                "Import API URL and token are required "
                "(FB_IMPORT_API_URL / FB_IMPORT_TOKEN or --api-url / --token)"
            )
            return False
        client = ImportApiClient(settings.api_url, settings.access_token, settings.timeout)

    orchestrator = UploadOrchestrator(
        client,
        parsed.records,
        pairs=pair_map,
        skip_pauses=settings.skip_pauses,
        tracker=tracker,
        summary=parsed.summary,
        show_progress=show_progress,
    )

    previous_handler = _install_cancel_handler(orchestrator)
    try:
        progress = orchestrator.run(decide or prompt_batch_decision)
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    print_upload_result(progress, orchestrator.elapsed)
    return True
