"""
Now Playing service.

Reads the station's metadata feed and turns it into a typed record the
client can use to detect track changes and refresh the voting panel.

Feed shape (all keys optional):
    {"artist", "title", "album", "date", "bit_depth", "sample_rate",
     "prev_artist_1", "prev_title_1", ..., "prev_artist_5", "prev_title_5"}
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx

from app.core.config import settings
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)

RECENT_TRACKS_DEPTH = 5


@dataclass
class RecentTrack:
    artist: str
    title: str


@dataclass
class NowPlaying:
    """Current track as reported by the metadata feed."""
    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None
    date: Optional[str] = None
    bit_depth: Optional[int] = None
    sample_rate: Optional[int] = None
    recent_tracks: List[RecentTrack] = field(default_factory=list)

    @property
    def has_track(self) -> bool:
        return bool(self.artist and self.title)

    @property
    def song_key(self) -> Optional[Tuple[str, str]]:
        """(artist, title) identity, or None when the feed has no track."""
        if not self.has_track:
            return None
        return (self.artist, self.title)

    def is_new_track(self, previous: Optional["NowPlaying"]) -> bool:
        """True if this differs from `previous` by song identity. Album is ignored."""
        if not self.has_track:
            return False
        return previous is None or previous.song_key != self.song_key


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_metadata(payload: Dict[str, Any]) -> NowPlaying:
    """Build a NowPlaying record from a raw feed payload."""
    if not isinstance(payload, dict):
        return NowPlaying()

    recent = []
    for i in range(1, RECENT_TRACKS_DEPTH + 1):
        artist = _text(payload.get(f"prev_artist_{i}"))
        title = _text(payload.get(f"prev_title_{i}"))
        if artist and title:
            recent.append(RecentTrack(artist=artist, title=title))

    return NowPlaying(
        artist=_text(payload.get("artist")),
        title=_text(payload.get("title")),
        album=_text(payload.get("album")),
        date=_text(payload.get("date")),
        bit_depth=_int(payload.get("bit_depth")),
        sample_rate=_int(payload.get("sample_rate")),
        recent_tracks=recent,
    )


def album_art_url(token: Optional[str] = None) -> str:
    """Cover image URL with a cache-busting token (milliseconds by default)."""
    if token is None:
        token = str(int(time.time() * 1000))
    return f"{settings.ALBUM_ART_URL}?t={token}"


class NowPlayingService:
    """Fetches the metadata feed over HTTP."""

    def __init__(
        self,
        metadata_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.metadata_url = metadata_url or settings.METADATA_URL
        self.timeout = timeout if timeout is not None else settings.METADATA_TIMEOUT
        self._transport = transport

    async def fetch(self) -> NowPlaying:
        """
        Read and parse the current metadata.

        Raises:
            UpstreamError: the feed is unreachable, errored or not JSON
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.metadata_url)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to fetch metadata from {self.metadata_url}: {e}")
            raise UpstreamError("Track info unavailable") from e

        return parse_metadata(payload)
