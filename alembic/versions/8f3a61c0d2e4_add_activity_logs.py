"""add_activity_logs

Revision ID: 8f3a61c0d2e4
Revises: 5d2c9e41a7b3
Create Date: 2026-10-19 14:03:27.904115

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8f3a61c0d2e4'
down_revision: Union[str, Sequence[str], None] = '5d2c9e41a7b3'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVITY_TYPES = (
    'sign_in',
    'password_changed',
    'plan_changed',
    'subscription_synced',
    'tenant_created',
    'tenant_deleted',
    'client_created',
    'client_deleted',
    'employee_created',
    'employee_deleted',
)


def upgrade() -> None:
    """
    Create the activity_logs audit table.

    Entries keep their row when the tenant or user they mention is
    deleted; the reference is set to NULL.
    """
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('tenant_id', sa.String(length=64), nullable=True),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column(
            'action',
            sa.Enum(*ACTIVITY_TYPES, name='activitytype', native_enum=False),
            nullable=False,
        ),
        sa.Column('entity', sa.String(length=50), nullable=True),
        sa.Column('entity_id', sa.String(length=64), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activity_logs_tenant_id', 'activity_logs', ['tenant_id'])
    op.create_index('ix_activity_logs_user_id', 'activity_logs', ['user_id'])
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_activity_logs_created_at', table_name='activity_logs')
    op.drop_index('ix_activity_logs_user_id', table_name='activity_logs')
    op.drop_index('ix_activity_logs_tenant_id', table_name='activity_logs')
    op.drop_table('activity_logs')
