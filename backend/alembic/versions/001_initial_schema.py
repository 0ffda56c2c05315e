"""Initial schema — game_rounds, round_history.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OUTCOME_COLUMNS = ("a1", "a2", "b1", "b2", "c1", "c2")


def upgrade() -> None:
    op.create_table(
        "game_rounds",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("round_index", sa.Integer, nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        *[sa.Column(name, sa.Integer, nullable=True) for name in OUTCOME_COLUMNS],
        sa.Column("seed", sa.JSON, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_game_rounds_round_index", "game_rounds", ["round_index"])

    op.create_table(
        "round_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("round_id", sa.Integer, nullable=True),
        sa.Column("round_started_at", sa.DateTime(timezone=True), nullable=False),
        *[sa.Column(name, sa.Integer, nullable=False) for name in OUTCOME_COLUMNS],
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_round_history_round_id", "round_history", ["round_id"])
    op.create_index("ix_round_history_created_at", "round_history", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_round_history_created_at", table_name="round_history")
    op.drop_index("ix_round_history_round_id", table_name="round_history")
    op.drop_table("round_history")
    op.drop_index("ix_game_rounds_round_index", table_name="game_rounds")
    op.drop_table("game_rounds")
