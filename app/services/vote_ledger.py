"""Vote ledger: one vote per (song, user), overwritten on change."""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.models.vote import Vote, VoteType
from app.services.storage import upsert, storage_errors

logger = logging.getLogger(__name__)

INVALID_VOTE_MESSAGE = "Valid userId and voteType (1 for like, -1 for dislike) are required"


def validate_vote(user_id: Optional[str], vote_type: Any) -> VoteType:
    """Check a vote's inputs and return the typed vote value."""
    if user_id is None or not str(user_id).strip():
        raise ValidationError(INVALID_VOTE_MESSAGE)
    # bool is an int subclass; True must not count as a like
    if isinstance(vote_type, bool) or not isinstance(vote_type, (int, float)):
        raise ValidationError(INVALID_VOTE_MESSAGE)
    if isinstance(vote_type, float):
        if not vote_type.is_integer():
            raise ValidationError(INVALID_VOTE_MESSAGE)
        vote_type = int(vote_type)
    try:
        return VoteType(vote_type)
    except ValueError:
        raise ValidationError(INVALID_VOTE_MESSAGE) from None


class VoteLedger:
    """Only writer of Vote rows. Write-only; counts come from AggregationEngine."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert_vote(self, song_id: int, user_id: str, vote_type: Any) -> None:
        """
        Record user_id's vote on song_id, replacing any earlier vote.

        The caller guarantees song_id exists. This is one atomic upsert, so
        two requests from the same user (a double click) leave a single row.
        """
        vote = validate_vote(user_id, vote_type)
        now = datetime.utcnow()

        async with storage_errors("record vote"):
            await upsert(
                self.session,
                Vote,
                key={"song_id": song_id, "user_id": user_id},
                values={"vote_type": int(vote), "updated_at": now},
            )

        logger.debug(f"Vote {vote.name} by {user_id} on song {song_id}")
