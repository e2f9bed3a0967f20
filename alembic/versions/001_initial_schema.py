"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 12:00:00.000000

Создаём таблицы сайта:
- users: администраторы
- clients: клиенты компании
- teams, members: команды и сотрудники
- gallery: фотогалерея
- inquiries: обращения с формы обратной связи
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _text(name: str, length: int = 255) -> sa.Column:
    return sa.Column(name, sa.String(length=length), nullable=False, server_default="")


def upgrade() -> None:
    """Создание таблиц сайта."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _text("name"),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("area", sa.String(length=255), nullable=False),
        _text("service_name"),
        _text("service_date", 64),
        _text("status", 64),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        _text("image_link", 512),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_clients"),
    )

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_teams"),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        _text("designation"),
        _text("contact"),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        _text("image_link", 512),
        sa.Column("show_on_homepage", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_members"),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"],
            name="fk_members_team_id_teams",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_members_team_id", "members", ["team_id"], unique=False)

    op.create_table(
        "gallery",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _text("title"),
        _text("image_link", 512),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_gallery"),
    )

    op.create_table(
        "inquiries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("inquiry_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        _text("mobile", 64),
        _text("email"),
        _text("subject"),
        sa.Column("message", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="NEW"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_inquiries"),
    )
    op.create_index("ix_inquiries_status", "inquiries", ["status"], unique=False)


def downgrade() -> None:
    """Удаление таблиц сайта."""
    op.drop_index("ix_inquiries_status", table_name="inquiries")
    op.drop_table("inquiries")
    op.drop_table("gallery")
    op.drop_index("ix_members_team_id", table_name="members")
    op.drop_table("members")
    op.drop_table("teams")
    op.drop_table("clients")
    op.drop_table("users")
