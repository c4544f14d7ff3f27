"""add media uploads

Revision ID: 8b2e4d61a0c3
Revises: 3f1a9c2d7e10
Create Date: 2026-10-19 14:30:00.000000

Records which user reserved each storage id and for what, so photos can
only be attached by their uploader.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '8b2e4d61a0c3'
down_revision: Union[str, None] = '3f1a9c2d7e10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id():
    return mysql.BIGINT(unsigned=True).with_variant(sa.Integer(), 'sqlite')


def upgrade() -> None:
    op.create_table(
        'media_uploads',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('storage_id', sa.String(255), nullable=False),
        sa.Column('owner_id', _id(), nullable=False),
        sa.Column('purpose', sa.Enum('profile_photo', 'post_photo', name='media_purpose_enum'), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        mysql_engine='InnoDB', mysql_charset='utf8mb4', mysql_collate='utf8mb4_unicode_ci'
    )
    op.create_index('ix_media_uploads_storage_id', 'media_uploads', ['storage_id'], unique=True)
    op.create_index('ix_media_uploads_owner_id', 'media_uploads', ['owner_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_media_uploads_owner_id', table_name='media_uploads')
    op.drop_index('ix_media_uploads_storage_id', table_name='media_uploads')
    op.drop_table('media_uploads')
