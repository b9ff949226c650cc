"""Tests for the vote ledger, aggregation engine and vote service."""
import asyncio

import pytest
from sqlalchemy import func, select

from app.core.errors import NotFoundError, StorageError, ValidationError
from app.models import Vote, VoteType
from app.services.aggregation import AggregationEngine, VoteCounts
from app.services.vote_ledger import VoteLedger
from app.services.voting import VoteService


def run(session_maker, body):
    """Run body(session) on a fresh session and return its result."""
    async def scenario():
        async with session_maker() as session:
            return await body(session)
    return asyncio.run(scenario())


class TestVoteLedger:

    def test_alternating_votes_leave_one_row(self, session_maker):
        async def body(session):
            song_id = (await VoteService(session).get_vote_info("Artist A", "Song X")).song_id
            ledger = VoteLedger(session)
            for vote in [1, -1, 1, -1, -1, 1]:
                await ledger.upsert_vote(song_id, "u1", vote)
            await session.commit()

            rows = (await session.execute(
                select(Vote).where(Vote.song_id == song_id, Vote.user_id == "u1")
            )).scalars().all()
            counts = await AggregationEngine(session).counts_for(song_id)
            return rows, counts

        rows, counts = run(session_maker, body)
        assert len(rows) == 1
        assert rows[0].vote_type == 1
        assert counts == VoteCounts(likes=1, dislikes=0)

    @pytest.mark.parametrize("user_id,vote_type", [
        ("", 1),
        (None, 1),
        ("u1", 0),
        ("u1", 2),
        ("u1", True),
        ("u1", "1"),
        ("u1", None),
        ("u1", 1.5),
        ("u1", float("nan")),
    ])
    def test_invalid_input_rejected(self, session_maker, user_id, vote_type):
        async def body(session):
            with pytest.raises(ValidationError):
                await VoteLedger(session).upsert_vote(1, user_id, vote_type)

        run(session_maker, body)


class TestAggregationEngine:

    def test_song_without_votes_counts_zero(self, session_maker):
        async def body(session):
            info = await VoteService(session).get_vote_info("Quiet", "Nobody Voted")
            return await AggregationEngine(session).counts_for(info.song_id)

        assert run(session_maker, body) == VoteCounts(likes=0, dislikes=0)

    def test_counts_mixed_votes(self, session_maker):
        async def body(session):
            service = VoteService(session)
            song_id = (await service.get_vote_info("Artist A", "Song X")).song_id
            for user, vote in [("u1", 1), ("u2", 1), ("u3", -1), ("u4", 1), ("u5", -1)]:
                await service.submit_vote(song_id, user, vote)
            return await AggregationEngine(session).counts_for(song_id)

        assert run(session_maker, body) == VoteCounts(likes=3, dislikes=2)

    def test_vote_for_tracks_latest(self, session_maker):
        async def body(session):
            service = VoteService(session)
            engine = AggregationEngine(session)
            song_id = (await service.get_vote_info("Artist A", "Song X")).song_id
            before = await engine.vote_for(song_id, "u1")
            await service.submit_vote(song_id, "u1", 1)
            after_like = await engine.vote_for(song_id, "u1")
            await service.submit_vote(song_id, "u1", -1)
            after_dislike = await engine.vote_for(song_id, "u1")
            return before, after_like, after_dislike

        assert run(session_maker, body) == (None, VoteType.LIKE, VoteType.DISLIKE)

    def test_counts_are_per_song(self, session_maker):
        async def body(session):
            service = VoteService(session)
            first = (await service.get_vote_info("Artist A", "Song X")).song_id
            second = (await service.get_vote_info("Artist A", "Song Y")).song_id
            await service.submit_vote(first, "u1", 1)
            await service.submit_vote(second, "u1", -1)
            engine = AggregationEngine(session)
            return await engine.counts_for(first), await engine.counts_for(second)

        first, second = run(session_maker, body)
        assert first == VoteCounts(likes=1, dislikes=0)
        assert second == VoteCounts(likes=0, dislikes=1)


class TestVoteService:

    def test_listener_session_scenario(self, session_maker):
        async def body(session):
            service = VoteService(session)
            info = await service.get_vote_info("Artist A", "Song X", None)
            steps = [
                await service.submit_vote(info.song_id, "u1", 1),
                await service.submit_vote(info.song_id, "u2", -1),
                await service.submit_vote(info.song_id, "u1", -1),
            ]
            u1 = await service.get_user_vote(info.song_id, "u1")
            u3 = await service.get_user_vote(info.song_id, "u3")
            return info, steps, u1, u3

        info, steps, u1, u3 = run(session_maker, body)
        assert info.song_id == 1
        assert (info.likes, info.dislikes) == (0, 0)
        assert info.album is None
        assert [(s.likes, s.dislikes, s.user_vote) for s in steps] == [
            (1, 0, 1),
            (1, 1, -1),
            (0, 2, -1),
        ]
        assert u1 == -1
        assert u3 is None

    def test_repeated_vote_is_idempotent(self, session_maker):
        async def body(session):
            service = VoteService(session)
            song_id = (await service.get_vote_info("Artist A", "Song X")).song_id
            first = await service.submit_vote(song_id, "u1", 1)
            second = await service.submit_vote(song_id, "u1", 1)
            return first, second

        first, second = run(session_maker, body)
        assert (first.likes, first.dislikes) == (1, 0)
        assert (second.likes, second.dislikes) == (1, 0)

    def test_vote_info_reports_stored_album(self, session_maker):
        async def body(session):
            service = VoteService(session)
            await service.get_vote_info("Artist A", "Song X", "First Album")
            return await service.get_vote_info("Artist A", "Song X", "Deluxe Edition")

        assert run(session_maker, body).album == "First Album"

    def test_unknown_song_is_not_found(self, session_maker):
        async def body(session):
            with pytest.raises(NotFoundError):
                await VoteService(session).submit_vote(42, "u1", 1)
            return await session.scalar(select(func.count()).select_from(Vote))

        assert run(session_maker, body) == 0

    def test_validation_happens_before_lookup(self, session_maker):
        async def body(session):
            # Unknown song, but the bad vote value is reported first
            with pytest.raises(ValidationError):
                await VoteService(session).submit_vote(42, "u1", 5)

        run(session_maker, body)

    def test_integral_float_vote_is_accepted(self, session_maker):
        async def body(session):
            service = VoteService(session)
            song_id = (await service.get_vote_info("Artist A", "Song X")).song_id
            result = await service.submit_vote(song_id, "u1", -1.0)
            return result, await service.get_user_vote(song_id, "u1")

        result, stored = run(session_maker, body)
        assert result.user_vote == VoteType.DISLIKE
        assert stored == VoteType.DISLIKE

    def test_out_of_range_song_id(self, session_maker):
        async def body(session):
            service = VoteService(session)
            with pytest.raises(NotFoundError):
                await service.submit_vote(10**23, "u1", 1)
            with pytest.raises(NotFoundError):
                await service.submit_vote(0, "u1", 1)
            return await service.get_user_vote(10**23, "u1")

        assert run(session_maker, body) is None

    def test_double_click_leaves_one_vote(self, session_maker):
        async def setup(session):
            return (await VoteService(session).get_vote_info("Artist A", "Song X")).song_id

        song_id = run(session_maker, setup)

        async def vote_in_own_session(vote_type):
            async with session_maker() as session:
                return await VoteService(session).submit_vote(song_id, "u1", vote_type)

        async def race():
            await asyncio.gather(*(vote_in_own_session(v) for v in [1, -1, 1, -1]))

        asyncio.run(race())

        async def inspect(session):
            rows = (await session.execute(
                select(Vote).where(Vote.song_id == song_id, Vote.user_id == "u1")
            )).scalars().all()
            counts = await AggregationEngine(session).counts_for(song_id)
            current = await AggregationEngine(session).vote_for(song_id, "u1")
            return rows, counts, current

        rows, counts, current = run(session_maker, inspect)
        assert len(rows) == 1
        assert counts.likes + counts.dislikes == 1
        assert current == rows[0].vote_type

    def test_user_vote_survives_new_session(self, session_maker):
        async def vote(session):
            service = VoteService(session)
            song_id = (await service.get_vote_info("Artist A", "Song X")).song_id
            await service.submit_vote(song_id, "u1", -1)
            return song_id

        async def read_back(session):
            return await VoteService(session).get_user_vote(1, "u1")

        assert run(session_maker, vote) == 1
        assert run(session_maker, read_back) == VoteType.DISLIKE

    def test_storage_failure_is_reported(self, tmp_path):
        from sqlalchemy.ext.asyncio import create_async_engine
        from sqlalchemy.pool import NullPool

        from app.core.database import make_session_maker

        # No tables created: every statement fails
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}",
            poolclass=NullPool,
        )

        async def body(session):
            with pytest.raises(StorageError):
                await VoteService(session).get_vote_info("Artist A", "Song X")

        run(make_session_maker(engine), body)
