#!/usr/bin/env python3
"""
Facebook Export Preprocessor

Turns a "Download your information" zip into the final list of records to
upload:

1. Locate the data root inside the archive
2. Run the structured (JSON) extractor, falling back to the HTML one when the
   JSON pass finds nothing
3. Pick up media files no document referenced
4. Extract comments and reactions and match them onto records
5. Deduplicate by source identity and compute the summary
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from common.exceptions import ArchiveError
from common.failure_tracker import FailureTracker
from processors.base import ExtractionContext, ExtractionStrategy
from processors.facebook.annotations import AnnotationExtractor
from processors.facebook.archive import ArchiveIndex, find_root_prefix
from processors.facebook.enrichment import GraphApiStats, merge_graph_api
from processors.facebook.markup import MarkupExtractor
from processors.facebook.matching import IdentityMatcher, attach_annotations
from processors.facebook.models import AnnotationSet, ImportSummary, MediaRecord
from processors.facebook.registry import merge_records
from processors.facebook.structured import StructuredExtractor
from processors.facebook.untagged import collect_untagged_media

logger = logging.getLogger(__name__)


@dataclass
class ParsedExport:
    """Result of parsing one archive"""

    records: List[MediaRecord]
    summary: ImportSummary
    identity: IdentityMatcher
    annotations: AnnotationSet = field(default_factory=AnnotationSet)
    prefix: str = ""
    strategy: Optional[str] = None


def select_strategy_results(
    context: ExtractionContext,
    primary: ExtractionStrategy,
    fallback: ExtractionStrategy,
) -> Tuple[str, List[MediaRecord]]:
    """Run primary; run fallback only if primary produced no records

    Returns:
        (name of the strategy whose records are used, records)
    """
    records = primary.extract(context)
    if records:
        return primary.get_name(), records

    logger.info(f"{primary.get_name()} found no media, trying {fallback.get_name()}")
    return fallback.get_name(), fallback.extract(context)


class FacebookPreprocessor:
    """Parses a Facebook export archive into upload-ready records"""

    def __init__(self, archive_path: Path, tracker: Optional[FailureTracker] = None):
        self.archive_path = Path(archive_path)
        self.tracker = tracker or FailureTracker(str(self.archive_path))

    def parse(self) -> ParsedExport:
        """Run the full pipeline.

        Raises:
            ArchiveError: Archive missing or unreadable, or no media found
        """
        logger.info(f"Parsing Facebook export {self.archive_path}")

        with ArchiveIndex.open(self.archive_path) as index:
            prefix = find_root_prefix(index.names)
            logger.info(f"Data root: {prefix or '(archive root)'}")
            context = ExtractionContext(index=index, prefix=prefix, tracker=self.tracker)

            strategy, records = select_strategy_results(
                context, StructuredExtractor(), MarkupExtractor()
            )
            records.extend(
                collect_untagged_media(context, {r.source_id for r in records})
            )
            if not records:
                raise ArchiveError(
                    "No photos or videos found in the archive", str(self.archive_path)
                )

            annotations = AnnotationExtractor().extract(context)

        attach_annotations(records, annotations, self.tracker)
        records = merge_records(records)
        summary = ImportSummary.from_records(records, annotations)

        logger.info(
            f"Parsed {summary.photos} photo(s), {summary.videos} video(s) "
            f"in {len(summary.albums)} album(s) using {strategy}"
        )
        return ParsedExport(
            records=records,
            summary=summary,
            identity=IdentityMatcher(records),
            annotations=annotations,
            prefix=prefix,
            strategy=strategy,
        )


def apply_enrichment(parsed: ParsedExport, content: str) -> GraphApiStats:
    """Merge a Graph API enrichment file into a parsed export and its summary

    Raises:
        InvalidEnrichmentFile: File rejected; parsed is left untouched
    """
    stats = merge_graph_api(content, parsed.records, parsed.identity)
    parsed.summary.apply_graph_stats(stats)
    return stats
