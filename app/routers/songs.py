"""
Songs Router

Voting endpoints used by the radio player: resolve the current track,
vote on it, and read back a listener's vote.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.voting import (
    VoteInfoRequest,
    VoteInfoResponse,
    VoteRequest,
    VoteResponse,
    UserVoteResponse,
)
from app.services.voting import MAX_SONG_ID, VoteService

router = APIRouter(prefix="/api/songs", tags=["songs"])

SongId = Annotated[int, Path(ge=1, le=MAX_SONG_ID)]


def get_vote_service(db: Annotated[AsyncSession, Depends(get_db)]) -> VoteService:
    return VoteService(db)


@router.post("/vote-info", response_model=VoteInfoResponse)
async def get_vote_info(
    request: VoteInfoRequest,
    service: Annotated[VoteService, Depends(get_vote_service)],
) -> VoteInfoResponse:
    """Resolve (artist, title) to a song id, creating it on first sight, with its tallies."""
    info = await service.get_vote_info(request.artist, request.title, request.album)
    return VoteInfoResponse(
        song_id=info.song_id,
        artist=info.artist,
        title=info.title,
        album=info.album,
        likes=info.likes,
        dislikes=info.dislikes,
    )


@router.post("/{song_id}/vote", response_model=VoteResponse)
async def submit_vote(
    song_id: SongId,
    request: VoteRequest,
    service: Annotated[VoteService, Depends(get_vote_service)],
) -> VoteResponse:
    """Like or dislike a song. A second vote by the same user replaces the first."""
    result = await service.submit_vote(song_id, request.user_id, request.vote_type)
    return VoteResponse(
        likes=result.likes,
        dislikes=result.dislikes,
        user_vote=int(result.user_vote),
    )


@router.get("/{song_id}/vote/{user_id}", response_model=UserVoteResponse)
async def get_user_vote(
    song_id: SongId,
    user_id: str,
    service: Annotated[VoteService, Depends(get_vote_service)],
) -> UserVoteResponse:
    """Get a listener's current vote on a song (null if they haven't voted)."""
    vote = await service.get_user_vote(song_id, user_id)
    return UserVoteResponse(user_vote=int(vote) if vote is not None else None)
