"""Create users, songs and votes tables.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    # One row per (artist, title)
    op.create_table(
        'songs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('artist', sa.String(500), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('album', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('artist', 'title', name='uq_song_identity'),
    )

    # One row per (song, user)
    op.create_table(
        'votes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('song_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('vote_type', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['song_id'], ['songs.id']),
        sa.UniqueConstraint('song_id', 'user_id', name='uq_vote_song_user'),
        sa.CheckConstraint('vote_type IN (1, -1)', name='check_vote_type'),
    )
    op.create_index('ix_votes_song_id', 'votes', ['song_id'])


def downgrade() -> None:
    op.drop_index('ix_votes_song_id', table_name='votes')
    op.drop_table('votes')
    op.drop_table('songs')
    op.drop_table('users')
