"""create_durable_entries

Revision ID: 3f9c1a7e2b40
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7e2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # One table backs every durable map; map_id keeps their rows apart
    op.create_table(
        'durable_entries',
        sa.Column('map_id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('map_id', 'key'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('durable_entries')
