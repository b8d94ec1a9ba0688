"""initial_schema

Revision ID: 3c9d1e7a5b20
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates users, profiles and plots plus the plot_status enum.  Requires the
uuid-ossp extension for server-side primary key defaults.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c9d1e7a5b20"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUM_PLOT_STATUS = postgresql.ENUM(
    "Preparation", "Active", "Harvested", name="plot_status", create_type=False
)


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')
    ENUM_PLOT_STATUS.create(op.get_bind(), checkfirst=True)

    # users
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("hashed_password", sa.String(128), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # profiles (primary key is the owning user's id)
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("farm_name", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("farming_type", sa.String(100), nullable=True),
        sa.Column("land_size", sa.String(50), nullable=True),
        sa.Column("primary_crop", sa.String(100), nullable=True),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # plots
    op.create_table(
        "plots",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("crop", sa.String(100), nullable=False),
        sa.Column("area", sa.Float(), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column(
            "status",
            ENUM_PLOT_STATUS,
            server_default=sa.text("'Preparation'"),
            nullable=False,
        ),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_plots_user_created", "plots", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_plots_user_created", table_name="plots")
    op.drop_table("plots")
    op.drop_table("profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    ENUM_PLOT_STATUS.drop(op.get_bind(), checkfirst=True)
