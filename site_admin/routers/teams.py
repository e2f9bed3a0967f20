# -*- coding: utf-8 -*-
"""
API роутер команд.

Эндпоинты:
- POST / - Создать команду
- GET /list - Список команд
- GET /list/details - Команды со списками сотрудников
- GET /{id} - Получить команду
- PUT /{id} - Переименовать команду
- DELETE /{id} - Удалить команду (только пустую)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.dependencies import CurrentUser, require_admin
from site_admin.database import get_db_session
from site_admin.db.models import Member, Team
from site_admin.models.common import CreatedResponse, MessageResponse
from site_admin.models.team import (
    MemberResponse,
    TeamCreate,
    TeamDataResponse,
    TeamDetailsResponse,
    TeamResponse,
    TeamUpdate,
    TeamWithMembers,
)
from site_admin.routers.params import bad_request, not_found, require_id
from site_admin.utils.security import clean_text

router = APIRouter()
logger = logging.getLogger("site_admin.routers.teams")


async def get_team_or_404(db: AsyncSession, team_id: int) -> Team:
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if team is None:
        raise not_found("team not found")
    return team


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    data: TeamCreate,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """Создание команды."""
    title = clean_text(data.title)
    if not title:
        raise bad_request("title is required")

    team = Team(title=title)
    db.add(team)
    await db.commit()

    logger.info(f"Команда создана: id={team.id}, title={title} (admin: {current_user.username})")

    return CreatedResponse(message="Team created successfully", id=team.id)


@router.get("/list", response_model=list[TeamResponse])
async def list_teams(
    db: AsyncSession = Depends(get_db_session),
):
    """Список команд, новые первыми."""
    result = await db.execute(select(Team).order_by(Team.created_at.desc(), Team.id.desc()))
    return [TeamResponse.model_validate(t) for t in result.scalars().all()]


@router.get("/list/details", response_model=TeamDetailsResponse)
async def list_teams_with_members(
    db: AsyncSession = Depends(get_db_session),
):
    """
    Команды со сотрудниками.

    Команды и сотрудники упорядочены по ID, пустые команды тоже
    попадают в ответ.
    """
    teams_result = await db.execute(select(Team).order_by(Team.id))
    teams = teams_result.scalars().all()

    members_result = await db.execute(select(Member).order_by(Member.id))
    members_by_team: dict[int, list[Member]] = {}
    for member in members_result.scalars().all():
        members_by_team.setdefault(member.team_id, []).append(member)

    data = [
        TeamWithMembers(
            team_id=team.id,
            team_name=team.title,
            members=[MemberResponse.from_row(m, team.title) for m in members_by_team.get(team.id, [])],
        )
        for team in teams
    ]

    return TeamDetailsResponse(message="Teams and members fetched successfully", data=data)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    """Получение команды по ID."""
    team = await get_team_or_404(db, require_id(team_id, "invalid team ID"))
    return TeamResponse.model_validate(team)


@router.put("/{team_id}", response_model=TeamDataResponse)
async def update_team(
    team_id: str,
    data: TeamUpdate,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """Переименование команды (пустое название игнорируется)."""
    team = await get_team_or_404(db, require_id(team_id, "invalid team ID"))

    title = clean_text(data.title)
    if title:
        team.title = title
        await db.commit()
        await db.refresh(team)
        logger.info(f"Команда обновлена: id={team.id} (admin: {current_user.username})")

    return TeamDataResponse(message="Team updated successfully", data=TeamResponse.model_validate(team))


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_team(
    team_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Удаление команды.

    Команду с сотрудниками удалить нельзя (409): сначала нужно
    перевести или удалить сотрудников.
    """
    team = await get_team_or_404(db, require_id(team_id, "invalid team ID"))

    members_count = await db.scalar(
        select(func.count(Member.id)).where(Member.team_id == team.id)
    )
    if members_count:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"team still has {members_count} member(s)",
        )

    team_pk = team.id
    await db.delete(team)
    await db.commit()

    logger.info(f"Команда удалена: id={team_pk} (admin: {current_user.username})")

    return MessageResponse(message="Team deleted successfully")
