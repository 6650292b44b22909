"""Initial schema: troy_status and strava_auth

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'troy_status',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('is_on_trail', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('beacon_url', sa.Text(), nullable=True),
        sa.Column('trail_status_updated', sa.DateTime(timezone=True), nullable=True),
    )

    # Token columns hold Fernet ciphertext
    op.create_table(
        'strava_auth',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('access_token', sa.LargeBinary(), nullable=False),
        sa.Column('refresh_token', sa.LargeBinary(), nullable=False),
        sa.Column('expires_at', sa.BigInteger(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('strava_auth')
    op.drop_table('troy_status')
