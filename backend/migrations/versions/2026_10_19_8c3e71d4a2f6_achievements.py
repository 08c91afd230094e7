"""achievements

Revision ID: 8c3e71d4a2f6
Revises: 5a1f0c2e9b7d
Create Date: 2026-10-19 16:40:08.217334

"""

from alembic import op
import sqlalchemy as sa
import sqlmodel

from models import UtcAwareDateTime

# revision identifiers, used by Alembic.
revision = "8c3e71d4a2f6"
down_revision = "5a1f0c2e9b7d"
branch_labels = None
depends_on = None

SPORTS = ("football", "padel", "basketball")


def upgrade() -> None:
    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column(
            "achievement_type", sqlmodel.sql.sqltypes.AutoString(), nullable=False
        ),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("sport", sa.Enum(*SPORTS, name="sport"), nullable=True),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("unlocked_at", UtcAwareDateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("user_achievements", schema=None) as batch_op:
        for column in ("user_id", "unlocked_at"):
            batch_op.create_index(
                batch_op.f(f"ix_user_achievements_{column}"), [column], unique=False
            )


def downgrade() -> None:
    op.drop_table("user_achievements")
