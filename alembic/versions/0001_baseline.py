"""Baseline migration - users, calendar slots and swap requests

Revision ID: 0001_baseline
Revises: 
Create Date: 2025-11-08

Creates the three tables the swap workflow runs on. Written with
portable column types so the same revision runs on PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, events and swap_requests."""

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    # ==========================================================================
    # Calendar slots
    # ==========================================================================
    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='BUSY', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_events_user_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_events'),
    )
    op.create_index('idx_events_user_start', 'events', ['user_id', 'start_time'])
    op.create_index('idx_events_status', 'events', ['status'])

    # ==========================================================================
    # Swap requests
    # ==========================================================================
    op.create_table(
        'swap_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('requester_id', sa.Uuid(), nullable=False),
        sa.Column('requester_slot_id', sa.Uuid(), nullable=True),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('owner_slot_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['requester_id'], ['users.id'], name='fk_swap_requests_requester_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_swap_requests_owner_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['requester_slot_id'], ['events.id'], name='fk_swap_requests_requester_slot_id_events', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['owner_slot_id'], ['events.id'], name='fk_swap_requests_owner_slot_id_events', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_swap_requests'),
    )
    op.create_index('idx_swap_requests_owner', 'swap_requests', ['owner_id', 'created_at'])
    op.create_index('idx_swap_requests_requester', 'swap_requests', ['requester_id', 'created_at'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('swap_requests')
    op.drop_table('events')
    op.drop_table('users')
