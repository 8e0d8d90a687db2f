"""create_users_and_messages

Revision ID: 001_initial
Revises:
Create Date: 2025-12-12 02:30:00

Users are keyed by their Telegram id; messages are append-only and
ordered by their bigserial id.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column('username', sa.String(255)),
        sa.Column('first_name', sa.String(255)),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'messages',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('role', sa.String(16), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )
    # recent-history lookup: WHERE user_id = ? ORDER BY id DESC LIMIT 5
    op.create_index('idx_messages_user_id_id', 'messages', ['user_id', 'id'], unique=False)


def downgrade():
    op.drop_index('idx_messages_user_id_id', table_name='messages')
    op.drop_table('messages')
    op.drop_table('users')
