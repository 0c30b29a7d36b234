"""Initial ledger schema: snapshots and operation journal.

Revision ID: 001_initial_ledger_schema
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_ledger_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'ledger_snapshots',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('height', sa.BigInteger(), nullable=False),
        sa.Column('total_supply', sa.BigInteger(), nullable=False),
        sa.Column('snapshot', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'ledger_operations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('operation', sa.String(32), nullable=False),
        sa.Column('caller', sa.String(128), nullable=False),
        sa.Column('height', sa.BigInteger(), nullable=False),
        sa.Column('arguments', sa.JSON(), nullable=False),
        sa.Column('ok', sa.Boolean(), nullable=False),
        sa.Column('error_code', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ix_ledger_operations_caller', 'ledger_operations', ['caller'],
    )


def downgrade() -> None:
    op.drop_index('ix_ledger_operations_caller', table_name='ledger_operations')
    op.drop_table('ledger_operations')
    op.drop_table('ledger_snapshots')
