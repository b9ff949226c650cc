"""Vote model: at most one row per (song, user)."""
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    String,
    DateTime,
    Integer,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.song import Song


class VoteType(IntEnum):
    """Value of a vote."""
    LIKE = 1
    DISLIKE = -1


class Vote(Base):
    """
    A listener's current opinion of a song.

    A later vote by the same user on the same song overwrites vote_type and
    updated_at in place; the (song_id, user_id) key never changes.
    """

    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    song_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("songs.id"),
        nullable=False,
        index=True,
    )

    # Client-supplied listener token
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)

    vote_type: Mapped[int] = mapped_column(Integer, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    song: Mapped["Song"] = relationship("Song", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("song_id", "user_id", name="uq_vote_song_user"),
        CheckConstraint("vote_type IN (1, -1)", name="check_vote_type"),
    )

    def __repr__(self) -> str:
        return f"<Vote song={self.song_id} user={self.user_id} type={self.vote_type}>"
