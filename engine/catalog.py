"""
Extraction rule sets for the target site's record shapes.
"""

from __future__ import annotations

from engine.constants import (
    DETAIL_ROOT,
    EPISODE_ITEM,
    EPISODES_ROOT,
    GENRE_SEPARATOR,
    LATEST_LISTING_ROOT,
    LISTING_ITEM,
    LISTING_STATUS_DEFAULT,
    SEARCH_LISTING_ROOT,
)
from engine.records import DetailRecord, EpisodeEntry, ListingRecord
from engine.rules import ExtractionRule, FieldRule
from engine.text import strip_prefix, url_path_slug

# Fields common to latest and search listing cards
_LISTING_FIELDS = (
    FieldRule("title", ".tt", source="first_text"),
    FieldRule("image_url", ".bsx img", source="attr", name="src"),
    FieldRule("status", ".status", default=LISTING_STATUS_DEFAULT),
    FieldRule("content_type", ".typez"),
    FieldRule("subtitle_flag", ".sb"),
)

LATEST_LISTING_RULE: ExtractionRule[ListingRecord] = ExtractionRule(
    name="latest_listing",
    root=LATEST_LISTING_ROOT,
    item=LISTING_ITEM,
    factory=ListingRecord,
    fields=(
        FieldRule("content_id", ".tip", source="attr", name="href", transforms=(url_path_slug,)),
        *_LISTING_FIELDS,
        FieldRule("episode_label", ".epx"),
        FieldRule("release_label", ".timeago"),
    ),
)

SEARCH_LISTING_RULE: ExtractionRule[ListingRecord] = ExtractionRule(
    name="search_listing",
    root=SEARCH_LISTING_ROOT,
    item=LISTING_ITEM,
    factory=ListingRecord,
    fields=(
        FieldRule(
            "content_id",
            ".tip",
            source="attr",
            name="href",
            transforms=(url_path_slug, strip_prefix("series/")),
        ),
        *_LISTING_FIELDS,
    ),
)


def _info_span(field: str, position: int, label: str = "") -> FieldRule:
    transforms = (strip_prefix(label),) if label else ()
    return FieldRule(field, f".info-content span:nth-of-type({position})", transforms=transforms)


DETAIL_RULE: ExtractionRule[DetailRecord] = ExtractionRule(
    name="detail",
    root=DETAIL_ROOT,
    factory=DetailRecord,
    fields=(
        FieldRule("title", ".entry-title"),
        FieldRule("description_html", ".ninfo p", source="html"),
        FieldRule("image_url", ".thumb img", source="attr", name="src"),
        _info_span("status", 1, "Status: "),
        FieldRule("studio", ".info-content span:nth-of-type(2) a"),
        _info_span("release_date", 3, "Released: "),
        _info_span("duration", 4, "Duration: "),
        _info_span("season", 5, "Season: "),
        _info_span("content_type", 6, "Type: "),
        _info_span("episode_count", 7, "Episodes: "),
        FieldRule("genres", ".genxed a", source="all_text", separator=GENRE_SEPARATOR),
    ),
)

EPISODE_RULE: ExtractionRule[EpisodeEntry] = ExtractionRule(
    name="episodes",
    root=EPISODES_ROOT,
    item=EPISODE_ITEM,
    factory=EpisodeEntry,
    fields=(
        FieldRule("number", None, transforms=(strip_prefix("Episode "),)),
        FieldRule("episode_id", None, source="property", name="href", transforms=(url_path_slug,)),
    ),
)
