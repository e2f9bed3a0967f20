# -*- coding: utf-8 -*-
"""
Pydantic схемы для команд и сотрудников.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from site_admin.services.images import CATEGORY_MEMBERS, image_url as build_image_url


# ==================== Команды ====================

class TeamCreate(BaseModel):
    """Создание команды."""
    title: str = Field("", max_length=255, description="Название команды")


class TeamUpdate(BaseModel):
    """Обновление команды: применяется только непустое название."""
    title: Optional[str] = Field(None, max_length=255, description="Новое название")


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class TeamDataResponse(BaseModel):
    error: bool = False
    message: str
    data: TeamResponse


# ==================== Сотрудники ====================

class MemberResponse(BaseModel):
    """Сотрудник с названием команды."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    team_id: int
    team_name: str = ""
    designation: str = ""
    contact: str = ""
    note: str = ""
    image_link: str = ""
    show_on_homepage: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def image_url(self) -> Optional[str]:
        return build_image_url(CATEGORY_MEMBERS, self.image_link)

    @classmethod
    def from_row(cls, member, team_name: Optional[str] = None) -> "MemberResponse":
        """Строит ответ из ORM объекта и названия команды из JOIN."""
        response = cls.model_validate(member)
        response.team_name = team_name or ""
        return response


class MemberListResponse(BaseModel):
    error: bool = False
    message: str
    members: list[MemberResponse]


class LeadersResponse(BaseModel):
    error: bool = False
    message: str
    leaders: list[MemberResponse]


class MemberDataResponse(BaseModel):
    error: bool = False
    message: str
    data: MemberResponse


class TeamWithMembers(BaseModel):
    """Команда со списком сотрудников."""
    team_id: int
    team_name: str
    members: list[MemberResponse] = Field(default_factory=list)


class TeamDetailsResponse(BaseModel):
    error: bool = False
    message: str
    data: list[TeamWithMembers]
