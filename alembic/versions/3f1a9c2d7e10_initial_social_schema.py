"""initial social schema

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-19 10:00:00.000000

Creates users, user_profiles, point_transactions, follows, posts,
comments, comment_replies and likes.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MYSQL_TABLE_KW = dict(mysql_engine='InnoDB', mysql_charset='utf8mb4', mysql_collate='utf8mb4_unicode_ci')


def _id():
    return mysql.BIGINT(unsigned=True).with_variant(sa.Integer(), 'sqlite')


def _created_at():
    return sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('external_id', sa.String(255), nullable=True, comment='Identity provider subject'),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('profile_photo_url', sa.String(1024), nullable=True),
        sa.Column('nickname', sa.String(120), nullable=True),
        sa.Column('given_name', sa.String(120), nullable=True),
        sa.Column('family_name', sa.String(120), nullable=True),
        sa.Column('phone_number', sa.String(32), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=True),
        sa.Column('phone_number_verified', sa.Boolean(), nullable=True),
        sa.Column('provider_updated_at', sa.DateTime(), nullable=True),
        _created_at(),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        **MYSQL_TABLE_KW
    )
    op.create_index('ix_users_external_id', 'users', ['external_id'], unique=True)

    op.create_table(
        'user_profiles',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('user_id', _id(), nullable=False),
        sa.Column('role', sa.Enum('shopper', 'business', 'delivery_driver', name='profile_role_enum'), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('profile_photo_id', sa.String(255), nullable=True),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('badges', sa.JSON(), nullable=False),
        sa.Column('joined_at', sa.TIMESTAMP(), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('website', sa.String(512), nullable=True),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('business_name', sa.String(255), nullable=True),
        sa.Column('business_category', sa.String(120), nullable=True),
        sa.Column('business_hours', sa.String(255), nullable=True),
        sa.Column('business_services', sa.JSON(), nullable=True),
        sa.Column('vehicle_type', sa.String(120), nullable=True),
        sa.Column('delivery_radius', sa.Float(), nullable=True),
        sa.Column('availability', sa.String(255), nullable=True),
        sa.Column('interests', sa.JSON(), nullable=True),
        sa.Column('favorite_verses', sa.JSON(), nullable=True),
        _created_at(),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_user_profiles_user', ondelete='CASCADE'),
        **MYSQL_TABLE_KW
    )
    op.create_index('ix_user_profiles_user_id', 'user_profiles', ['user_id'], unique=True)

    op.create_table(
        'point_transactions',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('user_id', _id(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, comment='Signed delta'),
        sa.Column('action', sa.String(64), nullable=False),
        sa.Column('description', sa.String(255), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_point_transactions_user', ondelete='CASCADE'),
        **MYSQL_TABLE_KW
    )
    op.create_index('idx_point_transactions_user', 'point_transactions', ['user_id', 'created_at'])

    op.create_table(
        'follows',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('follower_id', _id(), nullable=False, comment='User who is following'),
        sa.Column('following_id', _id(), nullable=False, comment='User being followed'),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], name='fk_follows_follower', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['following_id'], ['users.id'], name='fk_follows_following', ondelete='CASCADE'),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_follower_following'),
        sa.CheckConstraint('follower_id != following_id', name='ck_no_self_follow'),
        **MYSQL_TABLE_KW
    )
    op.create_index('ix_follows_follower_id', 'follows', ['follower_id'])
    op.create_index('ix_follows_following_id', 'follows', ['following_id'])

    op.create_table(
        'posts',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('author_id', _id(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.Enum('verse', 'prayer', 'testimony', 'general', name='post_type_enum'), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False),
        sa.Column('comments', sa.Integer(), nullable=False),
        sa.Column('shares', sa.Integer(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('photo_id', sa.String(255), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], name='fk_posts_author', ondelete='CASCADE'),
        **MYSQL_TABLE_KW
    )
    op.create_index('idx_posts_author', 'posts', ['author_id', 'created_at'])

    op.create_table(
        'comments',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('post_id', _id(), nullable=False),
        sa.Column('author_id', _id(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False),
        sa.Column('mentioned_users', sa.JSON(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='fk_comments_post', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], name='fk_comments_author', ondelete='CASCADE'),
        **MYSQL_TABLE_KW
    )
    op.create_index('idx_comments_post', 'comments', ['post_id', 'created_at'])

    op.create_table(
        'comment_replies',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('comment_id', _id(), nullable=False),
        sa.Column('author_id', _id(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('mentioned_users', sa.JSON(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], name='fk_comment_replies_comment', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], name='fk_comment_replies_author', ondelete='CASCADE'),
        **MYSQL_TABLE_KW
    )
    op.create_index('idx_comment_replies_comment', 'comment_replies', ['comment_id', 'created_at'])

    op.create_table(
        'likes',
        sa.Column('id', _id(), nullable=False, autoincrement=True),
        sa.Column('user_id', _id(), nullable=False),
        sa.Column('post_id', _id(), nullable=True),
        sa.Column('comment_id', _id(), nullable=True),
        sa.Column('type', sa.Enum('post', 'comment', name='like_type_enum'), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_likes_user', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='fk_likes_post', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], name='fk_likes_comment', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'post_id', name='uq_likes_user_post'),
        sa.UniqueConstraint('user_id', 'comment_id', name='uq_likes_user_comment'),
        sa.CheckConstraint(
            "(type = 'post' AND post_id IS NOT NULL AND comment_id IS NULL)"
            " OR (type = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)",
            name='ck_likes_single_target',
        ),
        **MYSQL_TABLE_KW
    )


def downgrade() -> None:
    op.drop_table('likes')
    op.drop_index('idx_comment_replies_comment', table_name='comment_replies')
    op.drop_table('comment_replies')
    op.drop_index('idx_comments_post', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_posts_author', table_name='posts')
    op.drop_table('posts')
    op.drop_index('ix_follows_following_id', table_name='follows')
    op.drop_index('ix_follows_follower_id', table_name='follows')
    op.drop_table('follows')
    op.drop_index('idx_point_transactions_user', table_name='point_transactions')
    op.drop_table('point_transactions')
    op.drop_index('ix_user_profiles_user_id', table_name='user_profiles')
    op.drop_table('user_profiles')
    op.drop_index('ix_users_external_id', table_name='users')
    op.drop_table('users')
