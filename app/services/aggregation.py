"""Read-only views over the vote ledger."""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vote import Vote, VoteType
from app.services.storage import storage_errors


@dataclass
class VoteCounts:
    """Like/dislike totals for one song."""
    likes: int = 0
    dislikes: int = 0


class AggregationEngine:
    """Computes tallies and per-user lookups from the votes table on read."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def counts_for(self, song_id: int) -> VoteCounts:
        """Count likes and dislikes for a song. A song without votes counts (0, 0)."""
        stmt = select(
            func.count(case((Vote.vote_type == int(VoteType.LIKE), 1))),
            func.count(case((Vote.vote_type == int(VoteType.DISLIKE), 1))),
        ).where(Vote.song_id == song_id)

        async with storage_errors("count votes"):
            result = await self.session.execute(stmt)
            likes, dislikes = result.one()

        return VoteCounts(likes=likes or 0, dislikes=dislikes or 0)

    async def vote_for(self, song_id: int, user_id: str) -> Optional[VoteType]:
        """Return the user's current vote on the song, or None if they never voted."""
        stmt = select(Vote.vote_type).where(
            Vote.song_id == song_id,
            Vote.user_id == user_id,
        )

        async with storage_errors("load user vote"):
            value = await self.session.scalar(stmt)

        return VoteType(value) if value is not None else None
