# -*- coding: utf-8 -*-
"""
API роутер сотрудников.

Эндпоинты:
- POST / - Добавить сотрудника (multipart, опционально profileImage)
- GET /list - Список сотрудников с фильтрами
- GET /chairman - Руководство компании
- GET /{id} - Получить сотрудника
- PUT /?id= - Обновить сотрудника
- DELETE /?id= - Удалить сотрудника
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.dependencies import CurrentUser, require_admin
from site_admin.database import get_db_session
from site_admin.db.models import Member, Team
from site_admin.models.common import CreatedResponse, MessageResponse
from site_admin.models.team import (
    LeadersResponse,
    MemberDataResponse,
    MemberListResponse,
    MemberResponse,
)
from site_admin.routers.params import bad_request, not_found, optional_int, require_id
from site_admin.services.images import (
    ImageStorage,
    commit_with_image,
    delete_with_image,
    get_member_storage,
    update_with_image,
)
from site_admin.utils.security import clean_text, parse_int

router = APIRouter()
logger = logging.getLogger("site_admin.routers.members")

LEADERSHIP_DESIGNATIONS = ("CHAIRMAN", "CEO & MANAGING DIRECTOR")

_TRUE_VALUES = {"1", "t", "true"}


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def member_with_team_query():
    return select(Member, Team.title).outerjoin(Team, Member.team_id == Team.id)


async def get_member_or_404(db: AsyncSession, member_id: int) -> MemberResponse:
    result = await db.execute(member_with_team_query().where(Member.id == member_id))
    row = result.first()
    if row is None:
        raise not_found("member not found")
    member, team_name = row
    return MemberResponse.from_row(member, team_name)


async def load_member_or_404(db: AsyncSession, member_id: int) -> Member:
    member = await db.get(Member, member_id)
    if member is None:
        raise not_found("member not found")
    return member


async def team_exists(db: AsyncSession, team_id: int) -> bool:
    return await db.get(Team, team_id) is not None


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    name: str = Form(""),
    team: str = Form(""),
    designation: str = Form(""),
    contact: str = Form(""),
    note: str = Form(""),
    showOnHome: str = Form(""),
    profileImage: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_member_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """Добавление сотрудника в существующую команду."""
    name = clean_text(name)
    team = clean_text(team)
    if not name or not team:
        raise bad_request("name and team are required")

    team_id = require_id(team, "invalid team id")
    if not await team_exists(db, team_id):
        raise bad_request("team not found")

    image = await storage.read_upload(profileImage)

    member = Member(
        name=name,
        team_id=team_id,
        designation=clean_text(designation),
        contact=clean_text(contact),
        note=clean_text(note),
        show_on_homepage=is_truthy(showOnHome),
    )
    image_saved = await commit_with_image(db, storage, member, name, image)

    logger.info(f"Сотрудник добавлен: id={member.id}, team={team_id} (admin: {current_user.username})")

    message = "Member created and image saved successfully" if image_saved else "Member created (no image uploaded)"
    return CreatedResponse(message=message, id=member.id)


@router.get("/list", response_model=MemberListResponse)
async def list_members(
    max_limit: Optional[str] = Query(None, description="Максимум записей (0: все)"),
    show_on_home: Optional[str] = Query(None, description="Только отмеченные для главной страницы"),
    designations: Optional[str] = Query(None, description="Должности через запятую"),
    team_id: Optional[str] = Query(None, description="ID команды"),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Список сотрудников, новые первыми.

    Каждый фильтр применяется только если он задан (числовые: если больше 0).
    """
    limit = optional_int(max_limit, "Invalid format for 'max_limit'. Must be an integer.")
    team_filter = optional_int(team_id, "Invalid format for 'team_id'. Must be an integer.")

    query = member_with_team_query()
    if team_filter and team_filter > 0:
        query = query.where(Member.team_id == team_filter)
    if is_truthy(show_on_home):
        query = query.where(Member.show_on_homepage.is_(True))
    if designations:
        wanted = [d.strip() for d in designations.split(",") if d.strip()]
        if wanted:
            query = query.where(Member.designation.in_(wanted))

    query = query.order_by(Member.created_at.desc(), Member.id.desc())
    if limit and limit > 0:
        query = query.limit(limit)

    result = await db.execute(query)
    members = [MemberResponse.from_row(m, title) for m, title in result.all()]

    return MemberListResponse(message="Members fetched successfully", members=members)


@router.get("/chairman", response_model=LeadersResponse)
async def list_leaders(
    db: AsyncSession = Depends(get_db_session),
):
    """Руководство компании (председатель и генеральный директор)."""
    query = (
        member_with_team_query()
        .where(Member.designation.in_(LEADERSHIP_DESIGNATIONS))
        .order_by(Member.id)
    )
    result = await db.execute(query)
    leaders = [MemberResponse.from_row(m, title) for m, title in result.all()]

    return LeadersResponse(message="Leadership messages retrieved successfully", leaders=leaders)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    """Получение сотрудника по ID."""
    return await get_member_or_404(db, require_id(member_id, "invalid member ID"))


@router.put("/", response_model=MemberDataResponse)
async def update_member(
    member_id: Optional[str] = Query(None, alias="id"),
    name: str = Form(""),
    team: str = Form(""),
    designation: str = Form(""),
    contact: str = Form(""),
    note: str = Form(""),
    showOnHome: str = Form(""),
    profileImage: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_member_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Обновление сотрудника.

    Непустые поля применяются, команда меняется только на существующую,
    флаг showOnHome пересчитывается всегда (отсутствие значит false).
    """
    pk = require_id(member_id, "invalid member ID")
    member = await load_member_or_404(db, pk)
    image = await storage.read_upload(profileImage)

    for field, value in (
        ("name", clean_text(name)),
        ("designation", clean_text(designation)),
        ("contact", clean_text(contact)),
        ("note", clean_text(note)),
    ):
        if value:
            setattr(member, field, value)

    try:
        new_team_id = parse_int(team)
    except ValueError:
        new_team_id = None
    if new_team_id and new_team_id > 0 and await team_exists(db, new_team_id):
        member.team_id = new_team_id

    member.show_on_homepage = is_truthy(showOnHome)

    await update_with_image(db, storage, member, member.name, image)
    await db.refresh(member)

    logger.info(f"Сотрудник обновлён: id={pk} (admin: {current_user.username})")

    return MemberDataResponse(
        message="Member updated successfully",
        data=await get_member_or_404(db, pk),
    )


@router.delete("/", response_model=MessageResponse)
async def delete_member(
    member_id: Optional[str] = Query(None, alias="id"),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_member_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """Удаление сотрудника и его фотографии."""
    pk = require_id(member_id, "invalid member ID")
    member = await load_member_or_404(db, pk)

    await delete_with_image(db, storage, member)

    logger.info(f"Сотрудник удалён: id={pk} (admin: {current_user.username})")

    return MessageResponse(message="Member deleted successfully")
