"""Database package: declarative base and ORM models."""

from .base import Base
from .models import Client, GalleryItem, Inquiry, Member, Team, User

__all__ = ["Base", "Client", "GalleryItem", "Inquiry", "Member", "Team", "User"]
