"""initial slide flashcards schema

Revision ID: 3b1c9e07d2a4
Revises:
Create Date: 2026-10-19 10:12:41.503118

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3b1c9e07d2a4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, stored files, flashcard sets and flashcards."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=1024), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_superuser", sa.Boolean(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    op.create_table(
        "stored_files",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("bucket", sa.String(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("content_type", sa.String(), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("path", sa.String(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_stored_files_bucket"), "stored_files", ["bucket"], unique=False
    )
    op.create_index(
        op.f("ix_stored_files_user_id"), "stored_files", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_stored_files_created_at"), "stored_files", ["created_at"], unique=False
    )

    op.create_table(
        "flashcard_sets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("standard", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("title_image_id", sa.String(length=32), nullable=False),
        sa.Column("thumbnail_id", sa.String(length=32), nullable=True),
        sa.Column("created_by_name", sa.String(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("flashcard_count", sa.Integer(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_flashcard_sets_id"), "flashcard_sets", ["id"], unique=False)
    op.create_index(
        op.f("ix_flashcard_sets_standard"), "flashcard_sets", ["standard"], unique=False
    )
    op.create_index(
        op.f("ix_flashcard_sets_subject"), "flashcard_sets", ["subject"], unique=False
    )
    op.create_index(
        op.f("ix_flashcard_sets_published"),
        "flashcard_sets",
        ["published"],
        unique=False,
    )
    op.create_index(
        op.f("ix_flashcard_sets_created_at"),
        "flashcard_sets",
        ["created_at"],
        unique=False,
    )

    op.create_table(
        "flashcards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("flashcard_set_id", sa.Integer(), nullable=False),
        sa.Column("front_image_id", sa.String(length=32), nullable=False),
        sa.Column("back_image_id", sa.String(length=32), nullable=False),
        sa.Column("card_number", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["flashcard_set_id"], ["flashcard_sets.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "flashcard_set_id", "card_number", name="uq_flashcard_set_card_number"
        ),
    )
    op.create_index(op.f("ix_flashcards_id"), "flashcards", ["id"], unique=False)
    op.create_index(
        op.f("ix_flashcards_flashcard_set_id"),
        "flashcards",
        ["flashcard_set_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index(op.f("ix_flashcards_flashcard_set_id"), table_name="flashcards")
    op.drop_index(op.f("ix_flashcards_id"), table_name="flashcards")
    op.drop_table("flashcards")
    op.drop_index(op.f("ix_flashcard_sets_created_at"), table_name="flashcard_sets")
    op.drop_index(op.f("ix_flashcard_sets_published"), table_name="flashcard_sets")
    op.drop_index(op.f("ix_flashcard_sets_subject"), table_name="flashcard_sets")
    op.drop_index(op.f("ix_flashcard_sets_standard"), table_name="flashcard_sets")
    op.drop_index(op.f("ix_flashcard_sets_id"), table_name="flashcard_sets")
    op.drop_table("flashcard_sets")
    op.drop_index(op.f("ix_stored_files_created_at"), table_name="stored_files")
    op.drop_index(op.f("ix_stored_files_user_id"), table_name="stored_files")
    op.drop_index(op.f("ix_stored_files_bucket"), table_name="stored_files")
    op.drop_table("stored_files")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
