"""initial schema: users, posts, post stats, files, comments and likes

Revision ID: 4f1b0c2d9e7a
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4f1b0c2d9e7a'
down_revision = None
branch_labels = None
depends_on = None


def _state_column():
    return sa.Column(
        'state',
        sa.Enum('active', 'deleted', name='recordstate', native_enum=False, length=16),
        nullable=False,
        server_default='active',
    )


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('nickname', sa.String(length=50), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        *_timestamps(),
        _state_column(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('nickname', name='uq_users_nickname'),
    )
    op.create_index('ix_users_state', 'users', ['state'], unique=False)

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(),
        _state_column(),
        sa.ForeignKeyConstraint(
            ['author_id'], ['users.id'],
            name=op.f('fk_posts_author_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_posts')),
    )
    op.create_index('ix_posts_author_id_state_id', 'posts', ['author_id', 'state', 'id'], unique=False)

    op.create_table(
        'post_stats',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('view_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('like_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('comment_count', sa.Integer(), server_default='0', nullable=False),
        sa.ForeignKeyConstraint(
            ['post_id'], ['posts.id'],
            name=op.f('fk_post_stats_post_id_posts'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_post_stats')),
        sa.UniqueConstraint('post_id', name='uq_post_stats_post_id'),
    )
    op.create_index(
        'ix_post_stats_like_count_post_id', 'post_stats', ['like_count', 'post_id'], unique=False
    )

    op.create_table(
        'files',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('original_name', sa.String(length=255), nullable=False),
        sa.Column('mime_type', sa.String(length=128), nullable=False),
        sa.Column('size', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['post_id'], ['posts.id'],
            name=op.f('fk_files_post_id_posts'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_files')),
    )
    op.create_index('ix_files_post_id', 'files', ['post_id'], unique=False)

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(),
        _state_column(),
        sa.ForeignKeyConstraint(
            ['post_id'], ['posts.id'],
            name=op.f('fk_comments_post_id_posts'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['author_id'], ['users.id'],
            name=op.f('fk_comments_author_id_users'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['parent_id'], ['comments.id'],
            name=op.f('fk_comments_parent_id_comments'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_comments')),
    )
    op.create_index('ix_comments_post_id_state', 'comments', ['post_id', 'state'], unique=False)
    op.create_index(
        'ix_comments_author_id_state_id', 'comments', ['author_id', 'state', 'id'], unique=False
    )

    op.create_table(
        'likes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_likes_user_id_users'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['post_id'], ['posts.id'],
            name=op.f('fk_likes_post_id_posts'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_likes')),
        sa.UniqueConstraint('user_id', 'post_id', name='uq_likes_user_id_post_id'),
    )


def downgrade():
    op.drop_table('likes')
    op.drop_index('ix_comments_author_id_state_id', table_name='comments')
    op.drop_index('ix_comments_post_id_state', table_name='comments')
    op.drop_table('comments')
    op.drop_index('ix_files_post_id', table_name='files')
    op.drop_table('files')
    op.drop_index('ix_post_stats_like_count_post_id', table_name='post_stats')
    op.drop_table('post_stats')
    op.drop_index('ix_posts_author_id_state_id', table_name='posts')
    op.drop_table('posts')
    op.drop_index('ix_users_state', table_name='users')
    op.drop_table('users')
