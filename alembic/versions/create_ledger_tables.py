"""create members, contributions, year summary tables

Revision ID: 3b9d2f6a1c47
Revises:
Create Date: 2026-10-17 09:12:31

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b9d2f6a1c47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('card_number', sa.String(length=50), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('job', sa.String(length=100), nullable=True),
        sa.Column('gender', sa.String(length=1), nullable=False, server_default='M'),
        sa.Column('member_type', sa.String(length=20), nullable=False, server_default='Communicant'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_members_card_number', 'members', ['card_number'], unique=True)

    # 금액은 Decimal 문자열(TEXT)로 저장
    op.create_table(
        'contributions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('period', sa.String(length=50), nullable=False),
        sa.Column('amount', sa.String(length=40), nullable=False, server_default='0'),
        sa.Column('recorded_year', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_contributions_member_id', 'contributions', ['member_id'])
    op.create_index('ix_contributions_recorded_year', 'contributions', ['recorded_year'])

    # closed_at IS NULL 이면 열린 연도
    op.create_table(
        'year_summaries',
        sa.Column('year', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('total', sa.String(length=40), nullable=False, server_default='0'),
        sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('year'),
    )

    op.create_table(
        'year_audit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('total', sa.String(length=40), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_year_audit_logs_year', 'year_audit_logs', ['year'])


def downgrade() -> None:
    op.drop_index('ix_year_audit_logs_year', table_name='year_audit_logs')
    op.drop_table('year_audit_logs')
    op.drop_table('year_summaries')
    op.drop_index('ix_contributions_recorded_year', table_name='contributions')
    op.drop_index('ix_contributions_member_id', table_name='contributions')
    op.drop_table('contributions')
    op.drop_index('ix_members_card_number', table_name='members')
    op.drop_table('members')
