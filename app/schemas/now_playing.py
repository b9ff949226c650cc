"""Pydantic schemas for the now-playing API."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RecentTrackResponse(BaseModel):
    artist: str
    title: str

    class Config:
        from_attributes = True


class NowPlayingResponse(BaseModel):
    """Current track, recent history and cover image."""
    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None
    date: Optional[str] = None
    bit_depth: Optional[int] = Field(None, alias="bitDepth")
    sample_rate: Optional[int] = Field(None, alias="sampleRate")
    has_track: bool = Field(alias="hasTrack")
    recent_tracks: List[RecentTrackResponse] = Field(default_factory=list, alias="recentTracks")
    album_art_url: str = Field(alias="albumArtUrl")
    stream_url: str = Field(alias="streamUrl")

    class Config:
        populate_by_name = True
        from_attributes = True
