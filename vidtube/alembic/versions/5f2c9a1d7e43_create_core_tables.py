"""Create core tables

Revision ID: 5f2c9a1d7e43
Revises:
Create Date: 2026-10-18 10:12:41.220113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '5f2c9a1d7e43'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# MySQL에서는 마이크로초까지 저장
TIMESTAMP = sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


def _timestamps():
    return [
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(120), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('fullname', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(1024), nullable=False),
        sa.Column('cover_image', sa.String(1024), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('refresh_token', sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'videos',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('video_file', sa.String(1024), nullable=False),
        sa.Column('thumbnail', sa.String(1024), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('duration', sa.Float, nullable=False),
        sa.Column('views', sa.Integer, nullable=False),
        sa.Column('is_published', sa.Boolean, nullable=False),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_videos_owner_id', 'videos', ['owner_id'])
    op.create_index('ix_videos_created_at', 'videos', ['created_at'])

    op.create_table(
        'comments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('video_id', sa.String(36), sa.ForeignKey('videos.id', ondelete='CASCADE'), nullable=False),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_comments_video_id', 'comments', ['video_id'])
    op.create_index('ix_comments_owner_id', 'comments', ['owner_id'])
    op.create_index('ix_comments_created_at', 'comments', ['created_at'])

    op.create_table(
        'tweets',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_tweets_owner_id', 'tweets', ['owner_id'])
    op.create_index('ix_tweets_created_at', 'tweets', ['created_at'])

    op.create_table(
        'likes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('video_id', sa.String(36), sa.ForeignKey('videos.id', ondelete='CASCADE'), nullable=True),
        sa.Column('comment_id', sa.String(36), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=True),
        sa.Column('tweet_id', sa.String(36), sa.ForeignKey('tweets.id', ondelete='CASCADE'), nullable=True),
        sa.Column('liked_by_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('video_id', 'liked_by_id', name='uq_likes_video_liked_by'),
        sa.UniqueConstraint('comment_id', 'liked_by_id', name='uq_likes_comment_liked_by'),
        sa.UniqueConstraint('tweet_id', 'liked_by_id', name='uq_likes_tweet_liked_by'),
        sa.CheckConstraint(
            '(video_id IS NOT NULL) + (comment_id IS NOT NULL) + (tweet_id IS NOT NULL) = 1',
            name='ck_likes_single_target',
        ),
    )
    op.create_index('ix_likes_video_id', 'likes', ['video_id'])
    op.create_index('ix_likes_comment_id', 'likes', ['comment_id'])
    op.create_index('ix_likes_tweet_id', 'likes', ['tweet_id'])
    op.create_index('ix_likes_liked_by_id', 'likes', ['liked_by_id'])
    op.create_index('ix_likes_created_at', 'likes', ['created_at'])

    op.create_table(
        'playlists',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_playlists_owner_id', 'playlists', ['owner_id'])
    op.create_index('ix_playlists_created_at', 'playlists', ['created_at'])

    op.create_table(
        'playlist_videos',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('playlist_id', sa.String(36), sa.ForeignKey('playlists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('video_id', sa.String(36), sa.ForeignKey('videos.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer, nullable=False),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index('ix_playlist_videos_playlist_id', 'playlist_videos', ['playlist_id'])
    op.create_index('ix_playlist_videos_video_id', 'playlist_videos', ['video_id'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('subscriber_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('channel_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriptions_subscriber_channel'),
    )
    op.create_index('ix_subscriptions_subscriber_id', 'subscriptions', ['subscriber_id'])
    op.create_index('ix_subscriptions_channel_id', 'subscriptions', ['channel_id'])
    op.create_index('ix_subscriptions_created_at', 'subscriptions', ['created_at'])


def downgrade() -> None:
    op.drop_table('subscriptions')
    op.drop_table('playlist_videos')
    op.drop_table('playlists')
    op.drop_table('likes')
    op.drop_table('tweets')
    op.drop_table('comments')
    op.drop_table('videos')
    op.drop_table('users')
