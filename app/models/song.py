"""Song model: one row per (artist, title) identity."""
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, DateTime, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.vote import Vote


class Song(Base):
    """
    A track as identified for voting purposes.

    Identity is the (artist, title) pair. Album is informational only and
    keeps whatever value the first resolve supplied.
    """

    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    artist: Mapped[str] = mapped_column(String(500), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    album: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    votes: Mapped[List["Vote"]] = relationship(
        "Vote",
        back_populates="song",
    )

    __table_args__ = (
        UniqueConstraint("artist", "title", name="uq_song_identity"),
    )

    def __repr__(self) -> str:
        return f"<Song {self.id} artist={self.artist} title={self.title}>"
