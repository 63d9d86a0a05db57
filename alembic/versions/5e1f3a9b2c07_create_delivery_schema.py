"""Create locations, ships, blocks and delivery_tasks tables

Revision ID: 5e1f3a9b2c07
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5e1f3a9b2c07"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "locations",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_locations_display_order"), "locations", ["display_order"], unique=False)

    op.create_table(
        "ships",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("ship_number", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ship_number"),
    )

    op.create_table(
        "blocks",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("ship_id", sa.String(), nullable=False),
        sa.Column("section", sa.String(), nullable=False),
        sa.Column("large_block", sa.String(), nullable=False),
        sa.Column("medium_block", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["ship_id"], ["ships.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ship_id", "section", "large_block", "medium_block", name="uq_block_path"),
    )
    op.create_index(op.f("ix_blocks_ship_id"), "blocks", ["ship_id"], unique=False)

    op.create_table(
        "delivery_tasks",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("ship_id", sa.String(), nullable=True),
        sa.Column("block_info", sa.String(), nullable=True),
        sa.Column("free_form_title", sa.String(), nullable=True),
        sa.Column("location_id", sa.String(), nullable=False),
        sa.Column("requested_date", sa.Date(), nullable=False),
        sa.Column("requested_time", sa.String(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("scheduled_start_time", sa.String(), nullable=True),
        sa.Column("scheduled_end_time", sa.String(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("special_status", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("person_in_charge", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["ship_id"], ["ships.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["location_id"], ["locations.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_delivery_tasks_ship_id"), "delivery_tasks", ["ship_id"], unique=False)
    op.create_index(op.f("ix_delivery_tasks_location_id"), "delivery_tasks", ["location_id"], unique=False)
    op.create_index(op.f("ix_delivery_tasks_requested_date"), "delivery_tasks", ["requested_date"], unique=False)
    op.create_index(op.f("ix_delivery_tasks_scheduled_date"), "delivery_tasks", ["scheduled_date"], unique=False)
    op.create_index(op.f("ix_delivery_tasks_status"), "delivery_tasks", ["status"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_delivery_tasks_status"), table_name="delivery_tasks")
    op.drop_index(op.f("ix_delivery_tasks_scheduled_date"), table_name="delivery_tasks")
    op.drop_index(op.f("ix_delivery_tasks_requested_date"), table_name="delivery_tasks")
    op.drop_index(op.f("ix_delivery_tasks_location_id"), table_name="delivery_tasks")
    op.drop_index(op.f("ix_delivery_tasks_ship_id"), table_name="delivery_tasks")
    op.drop_table("delivery_tasks")
    op.drop_index(op.f("ix_blocks_ship_id"), table_name="blocks")
    op.drop_table("blocks")
    op.drop_table("ships")
    op.drop_index(op.f("ix_locations_display_order"), table_name="locations")
    op.drop_table("locations")
