"""baseline_jobfit_schema

Revision ID: 4c1e9a7d2b60
Revises: 
Create Date: 2026-10-12 10:04:51.118204

Creates users, resume_generations, login_history and system_activity.
Idempotent: tables that already exist are left untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7d2b60'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_STATUS = sa.Enum('PENDING', 'APPROVED', 'ACTIVE', 'REJECTED', name='userstatus')
PLAN_TYPE = sa.Enum('NONE', 'FREE', 'PRO', name='plantype')
GENERATION_STATUS = sa.Enum('SUCCESS', 'FAILED', name='generationstatus')


def table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=True),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('password_hash', sa.String(), nullable=True),
            sa.Column('profile_image', sa.String(), nullable=True),
            sa.Column('status', USER_STATUS, nullable=False),
            sa.Column('plan', PLAN_TYPE, nullable=False),
            sa.Column('has_full_access', sa.Boolean(), nullable=False),
            sa.Column('credits_used', sa.Integer(), nullable=False),
            sa.Column('daily_resume_count', sa.Integer(), nullable=False),
            sa.Column('daily_resume_limit', sa.Integer(), nullable=False),
            sa.Column('last_resume_date', sa.Date(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    if not table_exists('resume_generations'):
        op.create_table('resume_generations',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=True),
            sa.Column('user_email', sa.String(), nullable=False),
            sa.Column('job_title', sa.String(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=False),
            sa.Column('match_score', sa.Integer(), nullable=False),
            sa.Column('original_name', sa.String(), nullable=False),
            sa.Column('status', GENERATION_STATUS, nullable=False),
            sa.Column('file_data', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_generation_user_created', 'resume_generations', ['user_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_resume_generations_created_at'), 'resume_generations', ['created_at'], unique=False)
        op.create_index(op.f('ix_resume_generations_id'), 'resume_generations', ['id'], unique=False)
        op.create_index(op.f('ix_resume_generations_status'), 'resume_generations', ['status'], unique=False)
        op.create_index(op.f('ix_resume_generations_user_id'), 'resume_generations', ['user_id'], unique=False)

    if not table_exists('login_history'):
        op.create_table('login_history',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('ip_address', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_login_history_id'), 'login_history', ['id'], unique=False)
        op.create_index(op.f('ix_login_history_user_id'), 'login_history', ['user_id'], unique=False)

    if not table_exists('system_activity'):
        op.create_table('system_activity',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=True),
            sa.Column('action', sa.String(), nullable=False),
            sa.Column('details', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_system_activity_action'), 'system_activity', ['action'], unique=False)
        op.create_index(op.f('ix_system_activity_id'), 'system_activity', ['id'], unique=False)
        op.create_index(op.f('ix_system_activity_user_id'), 'system_activity', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_table('system_activity')
    op.drop_table('login_history')
    op.drop_table('resume_generations')
    op.drop_table('users')
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_type in (GENERATION_STATUS, PLAN_TYPE, USER_STATUS):
            enum_type.drop(bind, checkfirst=True)
