"""initial fieldtrack schema

Revision ID: 3c1f0e7a9b21
Revises:
Create Date: 2026-10-18 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f0e7a9b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_jobs_id", "jobs", ["id"], unique=False)

    op.create_table(
        "components",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_components_id", "components", ["id"], unique=False)
    op.create_index("ix_components_job_id", "components", ["job_id"], unique=False)

    op.create_table(
        "workers",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_workers_id", "workers", ["id"], unique=False)

    op.create_table(
        "time_entries",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=False),
        sa.Column("component_id", sa.Integer(), sa.ForeignKey("components.id"), nullable=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("total_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("crew_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_manual", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("worker_names", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_time_entries_id", "time_entries", ["id"], unique=False)
    op.create_index("ix_time_entries_job_id", "time_entries", ["job_id"], unique=False)
    op.create_index("ix_time_entries_component_id", "time_entries", ["component_id"], unique=False)
    op.create_index("ix_time_entries_user_id", "time_entries", ["user_id"], unique=False)

    op.create_table(
        "photos",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("time_entry_id", sa.String(), sa.ForeignKey("time_entries.id"), nullable=True),
        sa.Column("component_id", sa.Integer(), sa.ForeignKey("components.id"), nullable=True),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=False),
        sa.Column("photo_url", sa.String(), nullable=False),
        sa.Column("photo_date", sa.Date(), nullable=False),
        sa.Column("uploaded_by", sa.String(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_photos_id", "photos", ["id"], unique=False)
    op.create_index("ix_photos_time_entry_id", "photos", ["time_entry_id"], unique=False)
    op.create_index("ix_photos_job_id", "photos", ["job_id"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=False),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("brief", sa.Text(), nullable=False),
        sa.Column("reference_id", sa.String(), nullable=True),
        sa.Column("reference_data", sa.JSON(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"], unique=False)
    op.create_index("ix_notifications_job_id", "notifications", ["job_id"], unique=False)
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"], unique=False)

    op.create_table(
        "materials_catalog",
        sa.Column("sku", sa.String(), primary_key=True, nullable=False),
        sa.Column("material_name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("unit_price", sa.Float(), nullable=True),
        sa.Column("purchase_cost", sa.Float(), nullable=True),
        sa.Column("part_length", sa.String(), nullable=True),
        sa.Column("raw_metadata", sa.JSON(), nullable=False),
    )
    op.create_index("ix_materials_catalog_material_name", "materials_catalog", ["material_name"], unique=False)

    op.create_table(
        "local_storage",
        sa.Column("key", sa.String(), primary_key=True, nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("local_storage")
    op.drop_index("ix_materials_catalog_material_name", table_name="materials_catalog")
    op.drop_table("materials_catalog")
    op.drop_index("ix_notifications_created_at", table_name="notifications")
    op.drop_index("ix_notifications_job_id", table_name="notifications")
    op.drop_index("ix_notifications_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_photos_job_id", table_name="photos")
    op.drop_index("ix_photos_time_entry_id", table_name="photos")
    op.drop_index("ix_photos_id", table_name="photos")
    op.drop_table("photos")
    op.drop_index("ix_time_entries_user_id", table_name="time_entries")
    op.drop_index("ix_time_entries_component_id", table_name="time_entries")
    op.drop_index("ix_time_entries_job_id", table_name="time_entries")
    op.drop_index("ix_time_entries_id", table_name="time_entries")
    op.drop_table("time_entries")
    op.drop_index("ix_workers_id", table_name="workers")
    op.drop_table("workers")
    op.drop_index("ix_components_job_id", table_name="components")
    op.drop_index("ix_components_id", table_name="components")
    op.drop_table("components")
    op.drop_index("ix_jobs_id", table_name="jobs")
    op.drop_table("jobs")
