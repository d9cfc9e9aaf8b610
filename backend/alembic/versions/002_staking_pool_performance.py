"""Add external pool performance records for staking pools.

Revision ID: 002_staking_performance
Revises: 001_initial
Create Date: 2026-10-17

One row per admin-entered result (date, APR, total staked, profit) of the
external venue a staking pool delegates to.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '002_staking_performance'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'staking_external_pool_performances',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'pool_id', UUID(as_uuid=True),
            sa.ForeignKey('staking_pools.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('apr', sa.Float(), nullable=False),
        sa.Column('total_staked', sa.Float(), nullable=False),
        sa.Column('profit', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        'ix_staking_external_pool_performances_pool_id',
        'staking_external_pool_performances', ['pool_id'],
    )
    op.create_index(
        'ix_staking_external_pool_performances_date',
        'staking_external_pool_performances', ['date'],
    )


def downgrade() -> None:
    op.drop_index('ix_staking_external_pool_performances_date', 'staking_external_pool_performances')
    op.drop_index('ix_staking_external_pool_performances_pool_id', 'staking_external_pool_performances')
    op.drop_table('staking_external_pool_performances')
