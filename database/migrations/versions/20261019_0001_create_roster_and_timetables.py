"""create roster and generated timetable tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("course_name", sa.String(length=200), nullable=False),
        sa.Column("branch_name", sa.String(length=200), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "sections",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("section_label", sa.String(length=50), nullable=False),
        sa.UniqueConstraint("course_id", "section_label", name="uq_sections_course_label"),
    )
    op.create_index("ix_sections_course_id", "sections", ["course_id"])

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=True),
    )
    op.create_index("ix_subjects_course_id", "subjects", ["course_id"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, server_default=""),
    )
    op.create_index("ix_teachers_name", "teachers", ["name"])

    op.create_table(
        "teacher_subjects",
        sa.Column("teacher_id", sa.Integer(), sa.ForeignKey("teachers.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "generated_timetables",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_generated_timetables_course_id", "generated_timetables", ["course_id"])


def downgrade() -> None:
    op.drop_index("ix_generated_timetables_course_id", table_name="generated_timetables")
    op.drop_table("generated_timetables")
    op.drop_table("teacher_subjects")
    op.drop_index("ix_teachers_name", table_name="teachers")
    op.drop_table("teachers")
    op.drop_index("ix_subjects_course_id", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_sections_course_id", table_name="sections")
    op.drop_table("sections")
    op.drop_table("courses")
