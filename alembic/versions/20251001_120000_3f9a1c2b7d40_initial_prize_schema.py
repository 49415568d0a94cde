"""Initial prize schema: competitions, breakdown, participants, winners, admins, settings

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2025-10-01 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'competitions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('period', sa.String(100), nullable=True),
        sa.Column('competition_type', sa.String(50), nullable=True),
        sa.Column('highlight_copy', sa.Text(), nullable=True),
        sa.Column('cta_text', sa.String(255), nullable=True),
        sa.Column('cta_link', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('prize_pool_usd', sa.Numeric(14, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_competitions_name', 'competitions', ['name'])
    op.create_index('ix_competitions_start_date', 'competitions', ['start_date'])
    op.create_index('ix_competitions_end_date', 'competitions', ['end_date'])

    op.create_table(
        'prize_breakdown',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('competition_id', sa.Uuid(), nullable=False),
        sa.Column('place', sa.Integer(), nullable=False),
        sa.Column('amount_usd', sa.Numeric(14, 2), nullable=False),
        sa.Column('percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('is_split', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['competition_id'], ['competitions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('competition_id', 'place', name='unique_breakdown_place'),
    )
    op.create_index('ix_prize_breakdown_competition_id', 'prize_breakdown', ['competition_id'])

    op.create_table(
        'participants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('competition_id', sa.Uuid(), nullable=False),
        sa.Column('wallet_address', sa.String(128), nullable=False),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('score', sa.Numeric(20, 4), nullable=True),
        sa.Column('rank', sa.Integer(), nullable=True),
        sa.Column('entry_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['competition_id'], ['competitions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('competition_id', 'wallet_address', name='unique_participant_wallet'),
    )
    op.create_index('ix_participants_competition_id', 'participants', ['competition_id'])
    op.create_index('ix_participants_wallet_address', 'participants', ['wallet_address'])
    op.create_index('ix_participants_rank', 'participants', ['rank'])

    op.create_table(
        'winners',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('competition_id', sa.Uuid(), nullable=False),
        sa.Column('wallet_address', sa.String(128), nullable=False),
        sa.Column('place', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('amount_usd', sa.Numeric(14, 2), nullable=False),
        sa.Column('payment_status', sa.String(20), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('tx_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['competition_id'], ['competitions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('competition_id', 'wallet_address', 'place', name='unique_winner_slot'),
    )
    op.create_index('ix_winners_competition_id', 'winners', ['competition_id'])
    op.create_index('ix_winners_payment_status', 'winners', ['payment_status'])

    op.create_table(
        'admin_users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=True),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked_until', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admin_users_username', 'admin_users', ['username'], unique=True)

    op.create_table(
        'app_settings',
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    op.drop_table('app_settings')
    op.drop_index('ix_admin_users_username', table_name='admin_users')
    op.drop_table('admin_users')
    op.drop_index('ix_winners_payment_status', table_name='winners')
    op.drop_index('ix_winners_competition_id', table_name='winners')
    op.drop_table('winners')
    op.drop_index('ix_participants_rank', table_name='participants')
    op.drop_index('ix_participants_wallet_address', table_name='participants')
    op.drop_index('ix_participants_competition_id', table_name='participants')
    op.drop_table('participants')
    op.drop_index('ix_prize_breakdown_competition_id', table_name='prize_breakdown')
    op.drop_table('prize_breakdown')
    op.drop_index('ix_competitions_end_date', table_name='competitions')
    op.drop_index('ix_competitions_start_date', table_name='competitions')
    op.drop_index('ix_competitions_name', table_name='competitions')
    op.drop_table('competitions')
