from app.models.song import Song
from app.models.vote import Vote, VoteType
from app.models.user import User

__all__ = [
    # Voting models
    "Song",
    "Vote",
    "VoteType",
    # Registration
    "User",
]
