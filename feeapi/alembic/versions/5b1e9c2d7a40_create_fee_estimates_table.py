"""create fee_estimates table

Revision ID: 5b1e9c2d7a40
Revises:
Create Date: 2026-10-17 09:12:41.220318

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b1e9c2d7a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'fee_estimates',
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('fee_data', sa.JSON(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('code')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('fee_estimates')
