"""baseline_migration

Revision ID: 7c1e4a9b2d10
Revises:
Create Date: 2026-10-19 09:12:44.118204

Creates the portal tables. Tables that already exist are left untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c1e4a9b2d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def _named_table(name: str) -> None:
    op.create_table(name,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index(op.f(f'ix_{name}_id'), name, ['id'], unique=False)


def upgrade() -> None:
    for name in ('colleges', 'courses', 'companies'):
        if not table_exists(name):
            _named_table(name)

    if not table_exists('students'):
        op.create_table('students',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('phone', sa.String(), nullable=False),
            sa.Column('year', sa.Integer(), nullable=True),
            sa.Column('branch', sa.String(), nullable=True),
            sa.Column('college_id', sa.Integer(), nullable=True),
            sa.Column('certificate', sa.LargeBinary(), nullable=True),
            sa.Column('certificate_id', sa.String(), nullable=True),
            sa.Column('eligible', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('certificate_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('downloaded_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['college_id'], ['colleges.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('phone')
        )
        op.create_index(op.f('ix_students_id'), 'students', ['id'], unique=False)
        op.create_index(op.f('ix_students_name'), 'students', ['name'], unique=False)
        op.create_index(op.f('ix_students_college_id'), 'students', ['college_id'], unique=False)

    if not table_exists('templates'):
        op.create_table('templates',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('template', sa.Text(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('is_selected', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_templates_id'), 'templates', ['id'], unique=False)
        op.create_index(op.f('ix_templates_company_id'), 'templates', ['company_id'], unique=False)
        op.create_index(op.f('ix_templates_created_at'), 'templates', ['created_at'], unique=False)

    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=True),
            sa.Column('role', sa.String(), nullable=False, server_default='student'),
            sa.Column('student_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('student_id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')

    op.drop_index(op.f('ix_templates_created_at'), table_name='templates')
    op.drop_index(op.f('ix_templates_company_id'), table_name='templates')
    op.drop_index(op.f('ix_templates_id'), table_name='templates')
    op.drop_table('templates')

    op.drop_index(op.f('ix_students_college_id'), table_name='students')
    op.drop_index(op.f('ix_students_name'), table_name='students')
    op.drop_index(op.f('ix_students_id'), table_name='students')
    op.drop_table('students')

    for name in ('companies', 'courses', 'colleges'):
        op.drop_index(op.f(f'ix_{name}_id'), table_name=name)
        op.drop_table(name)
