"""create refresh_tokens

Revision ID: 7f3c1a9e4b21
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3c1a9e4b21'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('refresh_token_hash', sa.String(length=255), nullable=False),
        sa.Column('client_ip', sa.String(length=45), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_refresh_tokens')),
    )
    op.create_index(
        'ix_refresh_tokens_user_id_created_at',
        'refresh_tokens',
        ['user_id', 'created_at'],
        unique=False,
    )


def downgrade():
    op.drop_index('ix_refresh_tokens_user_id_created_at', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
