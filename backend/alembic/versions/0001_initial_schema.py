"""Initial livestock feeding schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=120), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "notification_feeding", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.Column(
            "notification_vaccination",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
        ),
        sa.Column(
            "notification_health_reports",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        *_timestamps(),
    )

    op.create_table(
        "animals",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column(
            "species",
            sa.Enum("CATTLE", "GOATS", "CHICKENS", "PIGS", name="species"),
            nullable=False,
        ),
        sa.Column("breed", sa.String(length=120), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Numeric(10, 2), nullable=True),
        sa.Column(
            "health_status",
            sa.Enum("HEALTHY", "SICK", "INJURED", "RECOVERING", name="healthstatus"),
            nullable=False,
        ),
        sa.Column("photo_url", sa.String(length=1024), nullable=True),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_animals_user_id", "animals", ["user_id"])

    op.create_table(
        "feeding_schedules",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "animal_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("animals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("feed_type", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("feeding_time", sa.Time(), nullable=False),
        sa.Column(
            "frequency",
            sa.Enum("DAILY", "WEEKLY", "BI_WEEKLY", "MONTHLY", name="feedingfrequency"),
            nullable=False,
        ),
        sa.Column("days_of_week", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("next_feeding_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "next_feeding_authoritative",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
        ),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("quantity > 0", name="ck_feeding_schedule_quantity"),
    )
    op.create_index("ix_feeding_schedules_user_id", "feeding_schedules", ["user_id"])

    op.create_table(
        "feeding_records",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "animal_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("animals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "schedule_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("feeding_schedules.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("feed_type", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("fed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("quantity > 0", name="ck_feeding_record_quantity"),
    )
    op.create_index("ix_feeding_records_user_id", "feeding_records", ["user_id"])

    op.create_table(
        "feeding_reminders",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "schedule_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("feeding_schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("fire_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("dedupe_tag", sa.String(length=120), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "dedupe_tag", name="uq_feeding_reminder_tag"),
    )
    op.create_index("ix_feeding_reminders_user_id", "feeding_reminders", ["user_id"])

    op.create_table(
        "vaccinations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "animal_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("animals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("vaccine_name", sa.String(length=255), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("completed_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("SCHEDULED", "COMPLETED", "OVERDUE", name="vaccinationstatus"),
            nullable=False,
        ),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_vaccinations_user_id", "vaccinations", ["user_id"])

    op.create_table(
        "weight_records",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "animal_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("animals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("weight", sa.Numeric(10, 2), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_weight_records_user_id", "weight_records", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_weight_records_user_id", table_name="weight_records")
    op.drop_table("weight_records")
    op.drop_index("ix_vaccinations_user_id", table_name="vaccinations")
    op.drop_table("vaccinations")
    op.drop_index("ix_feeding_reminders_user_id", table_name="feeding_reminders")
    op.drop_table("feeding_reminders")
    op.drop_index("ix_feeding_records_user_id", table_name="feeding_records")
    op.drop_table("feeding_records")
    op.drop_index("ix_feeding_schedules_user_id", table_name="feeding_schedules")
    op.drop_table("feeding_schedules")
    op.drop_index("ix_animals_user_id", table_name="animals")
    op.drop_table("animals")
    op.drop_table("users")
    for enum_name in (
        "vaccinationstatus",
        "feedingfrequency",
        "healthstatus",
        "species",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
