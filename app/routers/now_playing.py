"""
Now Playing Router

Proxies the station metadata feed so the player gets one parsed record
with the recent tracks and a fresh album-art URL.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.schemas.now_playing import NowPlayingResponse, RecentTrackResponse
from app.services.now_playing import NowPlayingService, album_art_url

router = APIRouter(prefix="/api", tags=["now-playing"])


def get_now_playing_service() -> NowPlayingService:
    return NowPlayingService()


@router.get("/now-playing", response_model=NowPlayingResponse)
async def now_playing(
    service: Annotated[NowPlayingService, Depends(get_now_playing_service)],
) -> NowPlayingResponse:
    """Current track info. 502 if the metadata feed can't be read."""
    current = await service.fetch()
    return NowPlayingResponse(
        artist=current.artist,
        title=current.title,
        album=current.album,
        date=current.date,
        bit_depth=current.bit_depth,
        sample_rate=current.sample_rate,
        has_track=current.has_track,
        recent_tracks=[
            RecentTrackResponse(artist=t.artist, title=t.title)
            for t in current.recent_tracks
        ],
        album_art_url=album_art_url(),
        stream_url=settings.STREAM_URL,
    )
