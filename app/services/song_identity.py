"""Song identity store: (artist, title) -> stable song id."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.models.song import Song
from app.services.storage import insert_if_absent, storage_errors

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class SongIdentityStore:
    """
    Only writer of Song rows.

    Songs are created on first sight and never changed afterwards: a later
    resolve with a different album keeps the album stored first.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve_or_create(
        self,
        artist: Optional[str],
        title: Optional[str],
        album: Optional[str] = None,
    ) -> int:
        """
        Return the id of the song with this (artist, title), creating it if needed.

        Safe under concurrent calls for the same pair: the unique constraint
        on (artist, title) turns the losing insert into a no-op and both
        callers read back the same row.
        """
        if _is_blank(artist) or _is_blank(title):
            raise ValidationError("Artist and title are required")

        async with storage_errors("resolve song"):
            song_id, created = await insert_if_absent(
                self.session,
                Song,
                key={"artist": artist, "title": title},
                values={"album": album or None, "created_at": datetime.utcnow()},
            )

        if created:
            logger.info(f"Created song {song_id}: {artist} - {title}")
        return song_id

    async def get(self, song_id: int) -> Optional[Song]:
        async with storage_errors("load song"):
            result = await self.session.execute(select(Song).where(Song.id == song_id))
            return result.scalar_one_or_none()

    async def exists(self, song_id: int) -> bool:
        async with storage_errors("check song"):
            found = await self.session.scalar(select(Song.id).where(Song.id == song_id))
        return found is not None
