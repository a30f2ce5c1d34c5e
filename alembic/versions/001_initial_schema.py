"""Initial schema: students, exercises, categories, progress records, sets.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

set_type = sa.Enum("warmup", "preparation", "valid_1", "valid_2", "valid_3", name="set_type")


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_students")),
    )
    op.create_index(op.f("ix_students_name"), "students", ["name"], unique=False)

    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("muscle_group", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercises")),
    )
    op.create_index(op.f("ix_exercises_name"), "exercises", ["name"], unique=False)
    op.create_index(op.f("ix_exercises_muscle_group"), "exercises", ["muscle_group"], unique=False)

    op.create_table(
        "exercise_categories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["student_id"], ["students.id"],
            name=op.f("fk_exercise_categories_student_id_students"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercise_categories")),
    )
    op.create_index(
        "ix_exercise_categories_student_created", "exercise_categories", ["student_id", "created_at"], unique=False
    )

    op.create_table(
        "progress_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("weight", sa.Numeric(precision=8, scale=2), nullable=False, server_default="0"),
        sa.Column("reps", sa.String(length=50), nullable=False, server_default="0"),
        sa.Column("sets", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["student_id"], ["students.id"],
            name=op.f("fk_progress_records_student_id_students"), ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["exercise_id"], ["exercises.id"],
            name=op.f("fk_progress_records_exercise_id_exercises"), ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["category_id"], ["exercise_categories.id"],
            name=op.f("fk_progress_records_category_id_exercise_categories"), ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_progress_records")),
    )
    op.create_index(
        "ix_progress_records_student_recorded", "progress_records", ["student_id", "recorded_at"], unique=False
    )
    op.create_index("ix_progress_records_exercise_id", "progress_records", ["exercise_id"], unique=False)
    op.create_index("ix_progress_records_category_id", "progress_records", ["category_id"], unique=False)

    op.create_table(
        "exercise_sets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("progress_record_id", sa.Integer(), nullable=False),
        sa.Column("set_number", sa.Integer(), nullable=False),
        sa.Column("set_type", set_type, nullable=False),
        sa.Column("weight", sa.Numeric(precision=8, scale=2), nullable=False, server_default="0"),
        sa.Column("reps", sa.String(length=50), nullable=False, server_default="0"),
        sa.Column("notes", sa.String(length=500), nullable=False, server_default=""),
        sa.ForeignKeyConstraint(
            ["progress_record_id"], ["progress_records.id"],
            name=op.f("fk_exercise_sets_progress_record_id_progress_records"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exercise_sets")),
        sa.UniqueConstraint("progress_record_id", "set_number", name="uq_exercise_sets_record_number"),
    )
    op.create_index("ix_exercise_sets_progress_record_id", "exercise_sets", ["progress_record_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_exercise_sets_progress_record_id", table_name="exercise_sets")
    op.drop_table("exercise_sets")
    set_type.drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_progress_records_category_id", table_name="progress_records")
    op.drop_index("ix_progress_records_exercise_id", table_name="progress_records")
    op.drop_index("ix_progress_records_student_recorded", table_name="progress_records")
    op.drop_table("progress_records")
    op.drop_index("ix_exercise_categories_student_created", table_name="exercise_categories")
    op.drop_table("exercise_categories")
    op.drop_index(op.f("ix_exercises_muscle_group"), table_name="exercises")
    op.drop_index(op.f("ix_exercises_name"), table_name="exercises")
    op.drop_table("exercises")
    op.drop_index(op.f("ix_students_name"), table_name="students")
    op.drop_table("students")
