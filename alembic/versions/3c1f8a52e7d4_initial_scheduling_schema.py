"""initial scheduling schema

Revision ID: 3c1f8a52e7d4
Revises:
Create Date: 2026-09-14 10:12:41.204117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f8a52e7d4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def upgrade() -> None:
    # --- employees ---
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=128), nullable=True),
        *[
            sa.Column(day, sa.Float(), nullable=False, server_default=sa.text("8" if day not in ("saturday", "sunday") else "0"))
            for day in WEEKDAYS
        ],
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("is_planner", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *[sa.CheckConstraint(f"{day} BETWEEN 0 AND 24", name=f"ck_employee_{day}_hours") for day in WEEKDAYS],
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("display_name"),
    )

    # --- projects ---
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.Enum("active", "archived", name="project_status"), nullable=False, server_default="active"),
        sa.Column("budget_hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("minimum_hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("budget_hours >= 0", name="ck_project_budget_nonneg"),
        sa.CheckConstraint("minimum_hours >= 0", name="ck_project_minimum_nonneg"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_projects_client_name"), "projects", ["client_name"], unique=False)

    # --- allocations ---
    op.create_table(
        "allocations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("hours_assigned", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("hours_actual", sa.Float(), nullable=True),
        sa.Column("hours_computed", sa.Float(), nullable=True),
        sa.Column("status", sa.Enum("planned", "active", "completed", name="allocation_status"), nullable=False, server_default="planned"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.CheckConstraint("hours_assigned >= 0", name="ck_allocation_assigned_nonneg"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_allocations_employee_id"), "allocations", ["employee_id"], unique=False)
    op.create_index(op.f("ix_allocations_project_id"), "allocations", ["project_id"], unique=False)
    op.create_index("ix_allocation_emp_week", "allocations", ["employee_id", "week_start_date"], unique=False)

    # --- absences ---
    op.create_table(
        "absences",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("type", sa.Enum("vacation", "sick", "personal", "other", name="absence_type"), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.CheckConstraint("end_date >= start_date", name="ck_absence_window"),
        sa.CheckConstraint("hours BETWEEN 0 AND 24", name="ck_absence_hours"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_absences_employee_id"), "absences", ["employee_id"], unique=False)
    op.create_index("ix_absence_emp_start", "absences", ["employee_id", "start_date"], unique=False)

    # --- team events ---
    op.create_table(
        "team_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hours_reduction", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("full_day", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("affected_employee_ids", sa.JSON(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.CheckConstraint("hours_reduction >= 0", name="ck_team_event_hours_nonneg"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_team_events_date"), "team_events", ["date"], unique=False)

    # --- deadlines ---
    op.create_table(
        "deadlines",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("employee_hours", sa.JSON(), nullable=False),
        sa.Column("is_hidden", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["updated_by"], ["employees.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "month", name="uq_deadline_project_month"),
    )
    op.create_index(op.f("ix_deadlines_project_id"), "deadlines", ["project_id"], unique=False)
    op.create_index(op.f("ix_deadlines_month"), "deadlines", ["month"], unique=False)

    # --- edit locks: one row per (project, month) ---
    op.create_table(
        "edit_locks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "month", name="uq_edit_lock_project_month"),
    )
    op.create_index(op.f("ix_edit_locks_project_id"), "edit_locks", ["project_id"], unique=False)
    op.create_index(op.f("ix_edit_locks_month"), "edit_locks", ["month"], unique=False)
    op.create_index(op.f("ix_edit_locks_employee_id"), "edit_locks", ["employee_id"], unique=False)


def downgrade() -> None:
    op.drop_table("edit_locks")
    op.drop_table("deadlines")
    op.drop_table("team_events")
    op.drop_table("absences")
    op.drop_table("allocations")
    op.drop_table("projects")
    op.drop_table("employees")

    # enum types outlive their tables on PostgreSQL
    bind = op.get_bind()
    for enum_name in ("absence_type", "allocation_status", "project_status"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
