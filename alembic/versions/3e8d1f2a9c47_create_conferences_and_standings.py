"""create_conferences_and_standings

Revision ID: 3e8d1f2a9c47
Revises:
Create Date: 2026-03-02
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e8d1f2a9c47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "conferences",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_conferences_name"), "conferences", ["name"], unique=False)

    op.create_table(
        "standings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("conference_id", sa.Integer(), nullable=False),
        sa.Column("school", sa.String(length=200), nullable=False),
        sa.Column("overall_wins", sa.Integer(), nullable=False),
        sa.Column("overall_losses", sa.Integer(), nullable=False),
        sa.Column("overall_pct", sa.Float(), nullable=False),
        sa.Column("conference_wins", sa.Integer(), nullable=False),
        sa.Column("conference_losses", sa.Integer(), nullable=False),
        sa.Column("conference_pct", sa.Float(), nullable=False),
        sa.Column("streak", sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(["conference_id"], ["conferences.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_standings_conference_id"), "standings", ["conference_id"], unique=False)
    op.create_index(op.f("ix_standings_school"), "standings", ["school"], unique=False)
    op.create_index(op.f("ix_standings_overall_pct"), "standings", ["overall_pct"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_standings_overall_pct"), table_name="standings")
    op.drop_index(op.f("ix_standings_school"), table_name="standings")
    op.drop_index(op.f("ix_standings_conference_id"), table_name="standings")
    op.drop_table("standings")
    op.drop_index(op.f("ix_conferences_name"), table_name="conferences")
    op.drop_table("conferences")
