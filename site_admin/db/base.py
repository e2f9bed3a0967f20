"""Declarative base and column mixins shared by the site tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, MetaData, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Constraint names must match the ones in alembic/versions.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Root declarative base."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def text_column(length: int = 255) -> Mapped[str]:
    """NOT NULL string column that defaults to an empty string."""
    return mapped_column(String(length), nullable=False, default="", server_default="")


class TimestampMixin:
    """Adds created/updated timestamp columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )


class ImageLinkMixin:
    """Filename of the uploaded image, relative to the entity's image folder."""

    image_link: Mapped[str] = text_column(512)
