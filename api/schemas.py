"""
Pydantic schemas for API response contracts.

Field names follow Python conventions; the JSON wire names (camelCase, as
published by the original service) come from aliases.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from engine.records import DetailRecord, EpisodeEntry, ListingRecord, StreamResolution


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ListingItemResponse(_WireModel):
    """One latest-release or search result card."""

    content_id: str = Field(..., alias="episodeId")
    title: str
    image_url: str = Field(..., alias="image")
    episode_label: Optional[str] = Field(None, alias="episode")
    status: str
    content_type: str = Field(..., alias="type")
    subtitle_flag: str = Field(..., alias="sub")
    release_label: Optional[str] = Field(None, alias="releaseTime")

    @classmethod
    def from_record(cls, record: ListingRecord) -> "ListingItemResponse":
        return cls(**record.to_dict())


class DetailResponse(_WireModel):
    """Series detail page."""

    id: str
    title: str
    description_html: str = Field(..., alias="description")
    image_url: str = Field(..., alias="image")
    status: str
    studio: str
    release_date: str = Field(..., alias="released")
    duration: str
    season: str
    content_type: str = Field(..., alias="type")
    episode_count: str = Field(..., alias="episodes")
    genres: str = Field(..., alias="genre")

    @classmethod
    def from_record(cls, record: DetailRecord) -> "DetailResponse":
        return cls(**record.to_dict())


class EpisodeResponse(_WireModel):
    number: str
    episode_id: str = Field(..., alias="episodeId")

    @classmethod
    def from_record(cls, record: EpisodeEntry) -> "EpisodeResponse":
        return cls(**record.to_dict())


class StreamResponse(_WireModel):
    resolved_url: Optional[str] = Field(None, alias="url")

    @classmethod
    def from_record(cls, record: StreamResolution) -> "StreamResponse":
        return cls(**record.to_dict())
