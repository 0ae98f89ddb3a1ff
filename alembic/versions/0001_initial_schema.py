"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-10-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('friend_code', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('friend_code', name='uq_users_friend_code'),
    )

    # --- friendships ---
    op.create_table(
        'friendships',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_low', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_high', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('requester_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('user_low', 'user_high', name='uq_friendships_pair'),
        sa.CheckConstraint('user_low < user_high', name='ck_friendships_canonical_order'),
        sa.CheckConstraint('requester_id IN (user_low, user_high)', name='ck_friendships_requester_in_pair'),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'declined')", name='ck_friendships_status'),
    )
    op.create_index('ix_friendships_user_high', 'friendships', ['user_high'])

    # --- pillars ---
    op.create_table(
        'pillars',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.BigInteger(), nullable=False, server_default=str(0xFF3B82F6)),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_pillars_user_id', 'pillars', ['user_id'])

    # --- habits ---
    op.create_table(
        'habits',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('pillar_id', sa.Integer(), sa.ForeignKey('pillars.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('streak', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('streak >= 0', name='ck_habits_streak_non_negative'),
    )
    op.create_index('ix_habits_user_pillar', 'habits', ['user_id', 'pillar_id'])

    # --- habit_events ---
    op.create_table(
        'habit_events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('habit_name', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'habit_name', 'date', name='uq_habit_events_user_habit_date'),
    )
    op.create_index('ix_habit_events_user_name_date', 'habit_events', ['user_id', 'habit_name', 'date'])

    # --- moods ---
    op.create_table(
        'moods',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('mood', sa.Float(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_moods_user_recorded_at', 'moods', ['user_id', 'recorded_at'])

    # --- sleep_logs ---
    op.create_table(
        'sleep_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('hours', sa.Float(), nullable=False),
    )
    op.create_index('ix_sleep_logs_user_date', 'sleep_logs', ['user_id', 'date'])

    # --- journals ---
    op.create_table(
        'journals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('entry', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('mood', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('gratitude', sa.JSON(), nullable=False, server_default='[]'),
    )
    op.create_index('ix_journals_user_timestamp', 'journals', ['user_id', 'timestamp'])

    # --- goals ---
    op.create_table(
        'goals',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('goal_text', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('goals')
    op.drop_index('ix_journals_user_timestamp', table_name='journals')
    op.drop_table('journals')
    op.drop_index('ix_sleep_logs_user_date', table_name='sleep_logs')
    op.drop_table('sleep_logs')
    op.drop_index('ix_moods_user_recorded_at', table_name='moods')
    op.drop_table('moods')
    op.drop_index('ix_habit_events_user_name_date', table_name='habit_events')
    op.drop_table('habit_events')
    op.drop_index('ix_habits_user_pillar', table_name='habits')
    op.drop_table('habits')
    op.drop_index('ix_pillars_user_id', table_name='pillars')
    op.drop_table('pillars')
    op.drop_index('ix_friendships_user_high', table_name='friendships')
    op.drop_table('friendships')
    op.drop_table('users')
