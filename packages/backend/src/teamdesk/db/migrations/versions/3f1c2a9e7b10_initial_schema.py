"""initial schema: teams, users, tasks, projects, leads

Learn: Teams get their own table with a stable UUID. Users and all
team data reference teams.id, so a team could be renamed without
touching a single token-checked row.

Revision ID: 3f1c2a9e7b10
Revises:
Create Date: 2026-10-18 09:12:44.106521
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _team_owned_columns() -> list:
    return [
        sa.Column('team_id', sa.Uuid(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('created_by', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'teams',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('team_id', sa.Uuid(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_team_id', 'users', ['team_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('assignee', sa.String(length=100), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        *_team_owned_columns(),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('client', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False),
        *_team_owned_columns(),
    )

    op.create_table(
        'leads',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('company', sa.String(length=200), nullable=False),
        sa.Column('contact', sa.String(length=200), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('probability', sa.Integer(), nullable=False),
        *_team_owned_columns(),
    )

    for table in ('tasks', 'projects', 'leads'):
        op.create_index(f'ix_{table}_team_id', table, ['team_id'])
        op.create_index(f'ix_{table}_created_at', table, ['created_at'])


def downgrade() -> None:
    for table in ('leads', 'projects', 'tasks'):
        op.drop_index(f'ix_{table}_created_at', table_name=table)
        op.drop_index(f'ix_{table}_team_id', table_name=table)
        op.drop_table(table)
    op.drop_index('ix_users_team_id', table_name='users')
    op.drop_table('users')
    op.drop_table('teams')
