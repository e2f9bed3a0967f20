"""SQLAlchemy ORM models for the website content."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, ImageLinkMixin, TimestampMixin, text_column

ROLE_ADMIN = "Admin"

INQUIRY_STATUS_NEW = "NEW"
INQUIRY_STATUS_RESOLVED = "RESOLVED"
INQUIRY_STATUSES = (INQUIRY_STATUS_NEW, INQUIRY_STATUS_RESOLVED)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = text_column()
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=ROLE_ADMIN)


class Client(ImageLinkMixin, TimestampMixin, Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    area: Mapped[str] = mapped_column(String(255), nullable=False)
    service_name: Mapped[str] = text_column()
    # Свободный текст: фронтенд присылает дату в произвольном формате
    service_date: Mapped[str] = text_column(64)
    status: Mapped[str] = text_column(64)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")


class Team(TimestampMixin, Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    members: Mapped[list["Member"]] = relationship(
        "Member",
        back_populates="team",
        order_by="Member.id",
        passive_deletes=True,
    )


class Member(ImageLinkMixin, TimestampMixin, Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    designation: Mapped[str] = text_column()
    contact: Mapped[str] = text_column()
    note: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    show_on_homepage: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    team: Mapped["Team"] = relationship("Team", back_populates="members")


class GalleryItem(ImageLinkMixin, TimestampMixin, Base):
    __tablename__ = "gallery"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = text_column()


class Inquiry(TimestampMixin, Base):
    __tablename__ = "inquiries"

    id: Mapped[int] = mapped_column(primary_key=True)
    inquiry_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mobile: Mapped[str] = text_column(64)
    email: Mapped[str] = text_column()
    subject: Mapped[str] = text_column()
    message: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=INQUIRY_STATUS_NEW, server_default=INQUIRY_STATUS_NEW,
        index=True,
    )
