"""add plugin_data table

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Key/value store for the settings document: one row per storage key,
the whole document kept as JSON text and rewritten on every save.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "plugin_data",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("document", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_plugin_data_id", "plugin_data", ["id"])
    op.create_index("ix_plugin_data_key", "plugin_data", ["key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_plugin_data_key", table_name="plugin_data")
    op.drop_index("ix_plugin_data_id", table_name="plugin_data")
    op.drop_table("plugin_data")
