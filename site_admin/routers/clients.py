# -*- coding: utf-8 -*-
"""
API роутер клиентов.

Эндпоинты:
- POST / - Создать клиента (multipart, опционально profileImage)
- GET / - Список клиентов (фильтр ?status=)
- GET /metrics - Сводные показатели
- GET /profile/{id} - Получить клиента
- PUT /?id= - Обновить клиента
- DELETE /?id= - Удалить клиента
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy import case, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.dependencies import CurrentUser, require_admin
from site_admin.database import get_db_session
from site_admin.db.models import Client
from site_admin.models.client import (
    ClientDataResponse,
    ClientListResponse,
    ClientMetricsResponse,
    ClientResponse,
)
from site_admin.models.common import CreatedResponse, MessageResponse
from site_admin.routers.params import bad_request, not_found, require_id
from site_admin.services.images import (
    ImageStorage,
    commit_with_image,
    delete_with_image,
    get_client_storage,
    update_with_image,
)
from site_admin.utils.security import clean_text

router = APIRouter()
logger = logging.getLogger("site_admin.routers.clients")

STATUS_ACTIVE = "Active"
STATUS_COMPLETED = "Completed"


async def get_client_or_404(db: AsyncSession, client_id: int) -> Client:
    result = await db.execute(select(Client).where(Client.id == client_id))
    client = result.scalar_one_or_none()
    if client is None:
        raise not_found("client not found")
    return client


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    name: str = Form(""),
    area: str = Form(""),
    service_name: str = Form(""),
    service_date: str = Form(""),
    client_status: str = Form("", alias="status"),
    note: str = Form(""),
    profileImage: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_client_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Создание клиента.

    Сначала создаётся строка (ради ID для имени файла), затем
    сохраняется изображение и его имя записывается в строку.
    """
    name = clean_text(name)
    area = clean_text(area)
    if not name or not area:
        raise bad_request("name and area are required")

    image = await storage.read_upload(profileImage)

    client = Client(
        name=name,
        area=area,
        service_name=clean_text(service_name),
        service_date=clean_text(service_date),
        status=clean_text(client_status),
        note=clean_text(note),
    )
    image_saved = await commit_with_image(db, storage, client, name, image)

    logger.info(f"Клиент создан: id={client.id}, name={name} (admin: {current_user.username})")

    message = "Client created and image saved successfully" if image_saved else "Client created (no image uploaded)"
    return CreatedResponse(message=message, id=client.id)


@router.get("/", response_model=ClientListResponse)
async def list_clients(
    client_status: Optional[str] = Query(None, alias="status", description="Фильтр по статусу"),
    db: AsyncSession = Depends(get_db_session),
):
    """Список клиентов, новые первыми."""
    query = select(Client)
    client_status = clean_text(client_status)
    if client_status:
        query = query.where(Client.status == client_status)
    query = query.order_by(Client.created_at.desc(), Client.id.desc())

    result = await db.execute(query)
    clients = [ClientResponse.model_validate(c) for c in result.scalars().all()]

    return ClientListResponse(message="Clients retrieved successfully", clients=clients)


@router.get("/metrics", response_model=ClientMetricsResponse)
async def get_client_metrics(
    db: AsyncSession = Depends(get_db_session),
):
    """
    Сводка: уникальные клиенты по имени, активные и завершённые проекты.

    На пустой таблице SUM возвращает NULL, поэтому оборачиваем в coalesce.
    """
    query = select(
        func.count(distinct(Client.name)),
        func.coalesce(func.sum(case((Client.status == STATUS_ACTIVE, 1), else_=0)), 0),
        func.coalesce(func.sum(case((Client.status == STATUS_COMPLETED, 1), else_=0)), 0),
    )
    result = await db.execute(query)
    total, active, completed = result.one()

    return ClientMetricsResponse(
        total_distinct_clients=total or 0,
        active_projects=active or 0,
        completed_projects=completed or 0,
    )


@router.get("/profile/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    """Профиль клиента по ID."""
    client = await get_client_or_404(db, require_id(client_id, "invalid client id"))
    return ClientResponse.model_validate(client)


@router.put("/", response_model=ClientDataResponse)
async def update_client(
    client_id: Optional[str] = Query(None, alias="id"),
    name: str = Form(""),
    area: str = Form(""),
    service_name: str = Form(""),
    service_date: str = Form(""),
    client_status: str = Form("", alias="status"),
    note: str = Form(""),
    profileImage: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_client_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Обновление клиента.

    Применяются только непустые поля. Новое изображение заменяет
    старое с откатом при ошибке.
    """
    client = await get_client_or_404(db, require_id(client_id, "invalid client id"))
    image = await storage.read_upload(profileImage)

    updates = {
        "name": clean_text(name),
        "area": clean_text(area),
        "service_name": clean_text(service_name),
        "service_date": clean_text(service_date),
        "status": clean_text(client_status),
        "note": clean_text(note),
    }
    for field, value in updates.items():
        if value:
            setattr(client, field, value)

    await update_with_image(db, storage, client, client.name, image)
    await db.refresh(client)

    logger.info(f"Клиент обновлён: id={client.id} (admin: {current_user.username})")

    return ClientDataResponse(
        message="Client updated successfully",
        data=ClientResponse.model_validate(client),
    )


@router.delete("/", response_model=MessageResponse)
async def delete_client(
    client_id: Optional[str] = Query(None, alias="id"),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_client_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """Удаление клиента и его изображения."""
    client = await get_client_or_404(db, require_id(client_id, "invalid client id"))
    client_pk = client.id

    await delete_with_image(db, storage, client)

    logger.info(f"Клиент удалён: id={client_pk} (admin: {current_user.username})")

    return MessageResponse(message="Client deleted successfully")
