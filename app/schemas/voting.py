"""Pydantic schemas for song voting API."""

from typing import Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt


class VoteInfoRequest(BaseModel):
    """Current track metadata sent by the player."""
    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None


class VoteInfoResponse(BaseModel):
    """Resolved song with its tallies."""
    song_id: int = Field(alias="songId")
    artist: str
    title: str
    album: Optional[str] = None
    likes: int
    dislikes: int

    class Config:
        populate_by_name = True


class VoteRequest(BaseModel):
    """A like (1) or dislike (-1) from a listener token."""
    user_id: Optional[str] = Field(None, alias="userId")
    # JSON 1.0 is the same number as 1; strings and booleans are rejected
    vote_type: Optional[Union[StrictInt, StrictFloat]] = Field(None, alias="voteType")

    class Config:
        populate_by_name = True


class VoteResponse(BaseModel):
    """Tallies after a vote."""
    likes: int
    dislikes: int
    user_vote: int = Field(alias="userVote")

    class Config:
        populate_by_name = True


class UserVoteResponse(BaseModel):
    """A listener's current vote, null if none."""
    user_vote: Optional[int] = Field(None, alias="userVote")

    class Config:
        populate_by_name = True
