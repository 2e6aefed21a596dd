"""create users and applications

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '3f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ('student', 'employee', 'staff')
APPLICATION_STATUSES = (
    'submitted',
    'under_review',
    'approved',
    'ready_for_pickup',
    'returned',
    'rejected',
    'expired',
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('idno', sa.String(50), nullable=False),
        sa.Column('fullname', sa.String(150), nullable=False),
        sa.Column('email', sa.String(150), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('course', sa.String(100), nullable=True),
        sa.Column('year', sa.String(20), nullable=True),
        sa.Column('role', sa.Enum(*USER_ROLES, name='user_role'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_idno', 'users', ['idno'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('app_id', sa.String(30), nullable=False, unique=True),
        sa.Column(
            'user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('department', sa.String(150), nullable=True),
        sa.Column(
            'status',
            sa.Enum(*APPLICATION_STATUSES, name='application_status'),
            nullable=False,
        ),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('photo', sa.String(255), nullable=True),
        sa.Column('signature', sa.String(255), nullable=True),
        sa.Column('cor', sa.String(255), nullable=True),
        sa.Column('date_submitted', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_applications_user_id', 'applications', ['user_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])
    op.create_index('ix_application_status_created', 'applications', ['status', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_application_status_created', table_name='applications')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_user_id', table_name='applications')
    op.drop_table('applications')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_idno', table_name='users')
    op.drop_table('users')
    sa.Enum(name='application_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
