"""Create tasks table

Revision ID: 001_create_tasks
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_create_tasks'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the self-referencing tasks table."""
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='IN_PROGRESS'),
        sa.Column('parent_task_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['parent_task_id'], ['tasks.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('IN_PROGRESS', 'DONE', 'COMPLETE')",
            name='ck_tasks_status',
        ),
    )
    op.create_index('ix_tasks_parent_task_id', 'tasks', ['parent_task_id'])


def downgrade() -> None:
    op.drop_index('ix_tasks_parent_task_id', table_name='tasks')
    op.drop_table('tasks')
