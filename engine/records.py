"""
Record shapes produced by the extraction rules.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class ListingRecord:
    """One item of the latest-release or search listing."""

    content_id: str
    title: str
    image_url: str
    status: str
    content_type: str
    subtitle_flag: str
    episode_label: Optional[str] = None
    release_label: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DetailRecord:
    """Series detail page."""

    id: str
    title: str
    description_html: str
    image_url: str
    status: str
    studio: str
    release_date: str
    duration: str
    season: str
    content_type: str
    episode_count: str
    genres: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EpisodeEntry:
    number: str
    episode_id: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class StreamResolution:
    resolved_url: Optional[str]

    def to_dict(self) -> dict:
        return asdict(self)
