#!/usr/bin/env python3
"""
Comment and reaction extraction

Comments live in comments_and_reactions/ (newer exports) or comments/
(older ones). Reactions come in two shapes:

    nested (older)   {"reactions_v2": [{"timestamp": ..., "data": [{"reaction":
                       {"reaction": "LIKE", "actor": "Jane"}}]}]}
    flat (newer)     [{"timestamp": ..., "fbid": "1234", "label_values": [
                       {"label": "Reaction", "value": "LIKE"},
                       {"label": "Name", "value": "Jane"}]}]

Only the flat shape carries the Facebook object id that allows an exact match.
"""

import logging
from typing import Any, List, Optional

from common.progress import PHASE_ANNOTATE, progress_bar
from common.utils import basename
from processors.base import ExtractionContext
from processors.facebook.models import AnnotationSet, Comment, Reaction
from processors.facebook.text import decode_fb_string, epoch_to_datetime, utc_now

logger = logging.getLogger(__name__)

COMMENT_DIRS = ("comments_and_reactions/", "comments/")
REACTION_DIRS = ("comments_and_reactions/", "likes_and_reactions/")
NESTED_REACTION_KEYS = ("reactions_v2", "post_and_comment_reactions_v2")


def _timestamp(value):
    return epoch_to_datetime(value) or utc_now()


def _find_documents(context: ExtractionContext, dirs, keywords) -> List[str]:
    prefixes = tuple(f"{context.prefix}{d}" for d in dirs)
    return [
        name
        for name in context.index.names
        if name.startswith(prefixes)
        and name.lower().endswith(".json")
        and any(k in basename(name).lower() for k in keywords)
    ]


def parse_comments(payload: Any) -> List[Comment]:
    """Comments from a comments_v2 document"""
    comments = []
    if not isinstance(payload, dict):
        return comments
    for entry in payload.get("comments_v2") or []:
        for data in entry.get("data") or []:
            comment = data.get("comment") if isinstance(data, dict) else None
            if not comment:
                continue
            comments.append(
                Comment(
                    author_name=decode_fb_string(comment.get("author")) or "Unknown",
                    text=decode_fb_string(comment.get("comment")) or "",
                    timestamp=_timestamp(comment.get("timestamp")),
                )
            )
    return comments


def _label_value(label_values, label: str) -> Optional[str]:
    for item in label_values:
        if isinstance(item, dict) and item.get("label") == label:
            return item.get("value")
    return None


def parse_reactions(payload: Any) -> List[Reaction]:
    """Reactions from either the nested or the flat document shape"""
    reactions = []

    if isinstance(payload, dict):
        entries = []
        for key in NESTED_REACTION_KEYS:
            if payload.get(key):
                entries = payload[key]
                break
        for entry in entries:
            data = entry.get("data") or []
            reaction = data[0].get("reaction") if data and isinstance(data[0], dict) else None
            if not reaction:
                continue
            reactions.append(
                Reaction(
                    author_name=decode_fb_string(reaction.get("actor")) or "Unknown",
                    reaction_type=decode_fb_string(reaction.get("reaction")) or "LIKE",
                    timestamp=_timestamp(entry.get("timestamp")),
                )
            )

    elif isinstance(payload, list):
        for entry in payload:
            if not isinstance(entry, dict) or not entry.get("label_values"):
                continue
            label_values = entry["label_values"]
            reaction_type = _label_value(label_values, "Reaction")
            if reaction_type is None:
                continue
            fbid = entry.get("fbid")
            reactions.append(
                Reaction(
                    author_name=decode_fb_string(_label_value(label_values, "Name")) or "Unknown",
                    reaction_type=decode_fb_string(reaction_type) or "LIKE",
                    timestamp=_timestamp(entry.get("timestamp")),
                    stable_id=str(fbid) if fbid else None,
                )
            )

    return reactions


class AnnotationExtractor:
    """Collects every comment and reaction in the archive"""

    def extract(self, context: ExtractionContext) -> AnnotationSet:
        annotations = AnnotationSet()

        comment_docs = _find_documents(context, COMMENT_DIRS, ("comment",))
        for path in progress_bar(comment_docs, PHASE_ANNOTATE, "Reading comments"):
            try:
                annotations.comments.extend(parse_comments(context.index.read_json(path)))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to parse comments {path}: {e}")
                context.tracker.add_skipped_document(path, str(e))

        reaction_docs = _find_documents(context, REACTION_DIRS, ("reaction", "like"))
        for path in progress_bar(reaction_docs, PHASE_ANNOTATE, "Reading reactions"):
            try:
                annotations.reactions.extend(parse_reactions(context.index.read_json(path)))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to parse reactions {path}: {e}")
                context.tracker.add_skipped_document(path, str(e))

        logger.info(
            f"Extracted {len(annotations.comments)} comment(s) and "
            f"{len(annotations.reactions)} reaction(s)"
        )
        return annotations
