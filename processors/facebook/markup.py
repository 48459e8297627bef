#!/usr/bin/env python3
"""
Markup (HTML) extraction strategy

Fallback for exports downloaded in HTML format. Album pages under
posts/album/ carry one <section class="_a6-g"> per photo with the image and
its date; the page <title> is the album name. Captions and "Taken" dates
live on separate pages and are joined back by filename.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from common.import_config import CAPTION_PAGES
from common.progress import PHASE_EXTRACT, progress_bar
from common.utils import basename
from processors.base import ExtractionContext, ExtractionStrategy
from processors.facebook.archive import resolve_media_path
from processors.facebook.media import load_record, should_skip_uri
from processors.facebook.models import MediaRecord
from processors.facebook.text import decode_fb_string, parse_html_date

logger = logging.getLogger(__name__)

SECTION_CLASS = "_a6-g"
TIMESTAMP_CLASS = "_a72d"
CAPTION_CLASS = "_3-95"
LABEL_CLASS = "_a6-q"


@dataclass
class CaptionInfo:
    caption: Optional[str] = None
    taken_at: Optional[datetime] = None


def _is_caption_div(tag) -> bool:
    # Only the bare "_3-95" div; headers reuse the class with extra ones
    return tag.name == "div" and tag.get("class") == [CAPTION_CLASS]


def parse_caption_page(html: str) -> Dict[str, CaptionInfo]:
    """Map media filename -> caption/taken-date from one caption page"""
    soup = BeautifulSoup(html, "html.parser")
    captions: Dict[str, CaptionInfo] = {}

    for section in soup.find_all("section", class_=SECTION_CLASS):
        media = section.find(["img", "video"], src=True)
        if media is None:
            continue
        filename = basename(media["src"])
        if not filename:
            continue

        caption_div = section.find(_is_caption_div)
        caption = None
        if caption_div:
            caption = decode_fb_string(caption_div.get_text(strip=True)) or None

        taken_at = None
        for label in section.find_all("div", class_=LABEL_CLASS):
            if label.get_text(strip=True) == "Taken":
                value = label.find_next("div", class_=LABEL_CLASS)
                if value is not None:
                    taken_at = parse_html_date(value.get_text(strip=True))
                break

        if caption or taken_at:
            captions[filename] = CaptionInfo(caption=caption, taken_at=taken_at)

    return captions


class MarkupExtractor(ExtractionStrategy):
    """Extracts media from the HTML export"""

    @staticmethod
    def get_name() -> str:
        return "Markup HTML"

    def load_captions(self, context: ExtractionContext) -> Dict[str, CaptionInfo]:
        captions: Dict[str, CaptionInfo] = {}
        for page in CAPTION_PAGES:
            path = f"{context.prefix}posts/{page}"
            if path not in context.index:
                continue
            try:
                captions.update(parse_caption_page(context.index.read_text(path)))
            except (ValueError, KeyError) as e:
                logger.warning(f"Failed to parse captions {path}: {e}")
                context.tracker.add_skipped_document(path, str(e))
        logger.debug(f"Loaded {len(captions)} caption(s)")
        return captions

    def extract(self, context: ExtractionContext) -> List[MediaRecord]:
        pages = context.index.names_under(f"{context.prefix}posts/album/", ".html")
        logger.info(f"Found {len(pages)} HTML album page(s)")
        if not pages:
            return []

        captions = self.load_captions(context)
        records: List[MediaRecord] = []

        for path in progress_bar(pages, PHASE_EXTRACT, "Reading HTML albums"):
            try:
                soup = BeautifulSoup(context.index.read_text(path), "html.parser")
            except (ValueError, KeyError) as e:
                logger.warning(f"Failed to parse HTML album {path}: {e}")
                context.tracker.add_skipped_document(path, str(e))
                continue

            title = soup.title.get_text(strip=True) if soup.title else ""
            album_name = decode_fb_string(title) or None

            for section in soup.find_all("section", class_=SECTION_CLASS):
                try:
                    record = self._extract_section(
                        context, path, section, album_name, captions
                    )
                except (ValueError, KeyError, AttributeError) as e:
                    logger.warning(f"Skipping unparsable section in {path}: {e}")
                    context.tracker.add_skipped_document(path, f"section: {e}")
                    continue
                if record:
                    records.append(record)

        logger.info(f"Extracted {len(records)} record(s) from HTML")
        return records

    def _extract_section(
        self,
        context: ExtractionContext,
        page_path: str,
        section,
        album_name: Optional[str],
        captions: Dict[str, CaptionInfo],
    ) -> Optional[MediaRecord]:
        img = section.find("img", src=True)
        if img is None:
            return None
        src = img["src"]
        if should_skip_uri(src):
            return None

        entry_path = resolve_media_path(context.index, context.prefix, src)
        if entry_path is None:
            context.tracker.add_unresolved_reference(src, page_path)
            return None

        created_at = None
        stamp = section.find("div", class_=TIMESTAMP_CLASS)
        if stamp is not None:
            created_at = parse_html_date(stamp.get_text(strip=True))

        filename = basename(src) or "media"
        info = captions.get(filename, CaptionInfo())
        if created_at is None:
            created_at = info.taken_at

        return load_record(
            context,
            entry_path,
            source_id=f"fb_album_{src}",
            filename=filename,
            created_at=created_at,
            description=info.caption,
            album_name=album_name,
        )
