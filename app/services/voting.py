"""
Vote Service

Composes the song identity store, vote ledger and aggregation engine into
the three operations the radio client uses. Each operation commits its own
writes, so a vote counts as soon as the write is committed even if the
client goes away before reading the response.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, StorageError
from app.models.vote import VoteType
from app.services.aggregation import AggregationEngine
from app.services.song_identity import SongIdentityStore
from app.services.storage import storage_errors
from app.services.vote_ledger import VoteLedger, validate_vote

logger = logging.getLogger(__name__)

# Largest id a 64-bit INTEGER column holds
MAX_SONG_ID = 2**63 - 1


def _storable_id(song_id: int) -> bool:
    return 1 <= song_id <= MAX_SONG_ID


@dataclass
class VoteInfo:
    """A resolved song with its current tallies."""
    song_id: int
    artist: str
    title: str
    album: Optional[str]
    likes: int
    dislikes: int


@dataclass
class VoteResult:
    """Tallies after a vote, plus the vote just applied."""
    likes: int
    dislikes: int
    user_vote: VoteType


class VoteService:
    """Orchestrates song resolution and voting over one session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.songs = SongIdentityStore(session)
        self.ledger = VoteLedger(session)
        self.aggregation = AggregationEngine(session)

    @asynccontextmanager
    async def _rollback_on_storage_error(self) -> AsyncIterator[None]:
        try:
            yield
        except StorageError:
            await self.session.rollback()
            raise

    async def _commit(self) -> None:
        async with storage_errors("commit"):
            await self.session.commit()

    async def get_vote_info(
        self,
        artist: Optional[str],
        title: Optional[str],
        album: Optional[str] = None,
    ) -> VoteInfo:
        """
        Resolve (artist, title) to a song, creating it on first sight, and
        return it with its like/dislike counts.

        Clients must go through here before voting: it is the only path that
        creates songs.
        """
        async with self._rollback_on_storage_error():
            song_id = await self.songs.resolve_or_create(artist, title, album)
            await self._commit()

            song = await self.songs.get(song_id)
            counts = await self.aggregation.counts_for(song_id)

        return VoteInfo(
            song_id=song.id,
            artist=song.artist,
            title=song.title,
            album=song.album,
            likes=counts.likes,
            dislikes=counts.dislikes,
        )

    async def submit_vote(self, song_id: int, user_id: Optional[str], vote_type: Any) -> VoteResult:
        """
        Record or replace user_id's vote on an existing song.

        Raises:
            ValidationError: user_id empty or vote_type not 1/-1
            NotFoundError: song_id was never resolved through get_vote_info
            StorageError: persistence failure (the session is rolled back)
        """
        vote = validate_vote(user_id, vote_type)

        async with self._rollback_on_storage_error():
            if not _storable_id(song_id) or not await self.songs.exists(song_id):
                raise NotFoundError("Song not found")

            await self.ledger.upsert_vote(song_id, user_id, vote)
            await self._commit()

            counts = await self.aggregation.counts_for(song_id)

        logger.info(f"Song {song_id} now at {counts.likes} likes / {counts.dislikes} dislikes")
        return VoteResult(likes=counts.likes, dislikes=counts.dislikes, user_vote=vote)

    async def get_user_vote(self, song_id: int, user_id: str) -> Optional[VoteType]:
        """Return user_id's current vote on song_id, or None."""
        if not _storable_id(song_id):
            return None
        return await self.aggregation.vote_for(song_id, user_id)
