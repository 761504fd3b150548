"""initial_schema

Revision ID: 4b2e91c07a3d
Revises: 
Create Date: 2026-10-19 10:12:31.204118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b2e91c07a3d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create records table
    op.create_table('records',
        sa.Column('id', sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )

    # Indexes backing the sortable fields
    op.create_index('records_created_at_id', 'records', ['created_at', 'id'], unique=False)
    op.create_index('records_category_id', 'records', ['category', 'id'], unique=False)


def downgrade() -> None:
    op.drop_index('records_category_id', table_name='records')
    op.drop_index('records_created_at_id', table_name='records')
    op.drop_table('records')
