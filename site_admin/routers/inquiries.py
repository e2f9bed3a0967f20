# -*- coding: utf-8 -*-
"""
API роутер обращений посетителей.

Эндпоинты:
- POST / - Отправить обращение (публичный)
- GET / - Список обращений со счётчиками по статусам
- GET /{id} - Получить обращение
- PATCH /update-status?id= - Обновить обращение / статус
- DELETE /?id= - Удалить обращение
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.dependencies import CurrentUser, require_admin
from site_admin.database import get_db_session
from site_admin.db.models import INQUIRY_STATUS_NEW, INQUIRY_STATUSES, Inquiry
from site_admin.models.common import CreatedResponse, MessageResponse
from site_admin.models.inquiry import (
    InquiryCounts,
    InquiryCreate,
    InquiryDataResponse,
    InquiryListResponse,
    InquiryResponse,
    InquiryUpdate,
)
from site_admin.routers.params import bad_request, not_found, optional_int, require_id
from site_admin.utils.security import clean_text

router = APIRouter()
logger = logging.getLogger("site_admin.routers.inquiries")


async def get_inquiry_or_404(db: AsyncSession, inquiry_id: int) -> Inquiry:
    inquiry = await db.get(Inquiry, inquiry_id)
    if inquiry is None:
        raise not_found("inquiry not found")
    return inquiry


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_inquiry(
    data: InquiryCreate,
    db: AsyncSession = Depends(get_db_session),
):
    """Приём обращения с публичной формы сайта."""
    if not data.has_all_fields():
        raise bad_request("All fields are required")

    inquiry = Inquiry(
        name=data.name,
        mobile=data.mobile,
        email=data.email,
        subject=data.subject,
        message=data.message,
        status=INQUIRY_STATUS_NEW,
    )
    db.add(inquiry)
    await db.commit()

    logger.info(f"Новое обращение: id={inquiry.id}, subject={data.subject}")

    return CreatedResponse(message="Inquiry submitted successfully", id=inquiry.id)


@router.get("/", response_model=InquiryListResponse)
async def list_inquiries(
    inquiry_status: Optional[str] = Query(None, alias="status", description="Фильтр по статусу"),
    page_index: Optional[str] = Query(None, description="Номер страницы, с 1"),
    page_length: Optional[str] = Query(None, description="Размер страницы (0: все)"),
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Список обращений, свежие первыми.

    Счётчики по статусам считаются по всей таблице, без учёта фильтра
    и пагинации.
    """
    page = optional_int(page_index, "invalid page_index") or 1
    length = optional_int(page_length, "invalid page_length") or 0

    query = select(Inquiry)
    inquiry_status = clean_text(inquiry_status).upper()
    if inquiry_status:
        query = query.where(Inquiry.status == inquiry_status)
    query = query.order_by(Inquiry.inquiry_date.desc(), Inquiry.id.desc())
    if length > 0:
        query = query.offset((max(page, 1) - 1) * length).limit(length)

    result = await db.execute(query)
    inquiries = [InquiryResponse.model_validate(i) for i in result.scalars().all()]

    counts_result = await db.execute(
        select(Inquiry.status, func.count(Inquiry.id)).group_by(Inquiry.status)
    )
    counts = InquiryCounts()
    for row_status, count in counts_result.all():
        if row_status in INQUIRY_STATUSES:
            setattr(counts, row_status, count)

    return InquiryListResponse(inquiries=inquiries, counts=counts)


@router.get("/{inquiry_id}", response_model=InquiryResponse)
async def get_inquiry(
    inquiry_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """Получение обращения по ID."""
    inquiry = await get_inquiry_or_404(db, require_id(inquiry_id, "invalid inquiry ID"))
    return InquiryResponse.model_validate(inquiry)


@router.patch("/update-status", response_model=InquiryDataResponse)
async def update_inquiry(
    data: InquiryUpdate,
    inquiry_id: Optional[str] = Query(None, alias="id"),
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Частичное обновление обращения.

    Пустые поля не меняются. Статус допускается только NEW или RESOLVED.
    """
    inquiry = await get_inquiry_or_404(db, require_id(inquiry_id, "invalid inquiry ID"))

    new_status = clean_text(data.status).upper()
    if new_status and new_status not in INQUIRY_STATUSES:
        raise bad_request(f"invalid status, allowed: {', '.join(INQUIRY_STATUSES)}")

    for field in ("name", "mobile", "email", "subject", "message"):
        value = clean_text(getattr(data, field))
        if value:
            setattr(inquiry, field, value)
    if new_status:
        inquiry.status = new_status

    await db.commit()
    await db.refresh(inquiry)

    logger.info(f"Обращение обновлено: id={inquiry.id}, status={inquiry.status} (admin: {current_user.username})")

    return InquiryDataResponse(
        message="Inquiry updated successfully",
        data=InquiryResponse.model_validate(inquiry),
    )


@router.delete("/", response_model=MessageResponse)
async def delete_inquiry(
    inquiry_id: Optional[str] = Query(None, alias="id"),
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """Удаление обращения."""
    inquiry = await get_inquiry_or_404(db, require_id(inquiry_id, "invalid inquiry ID"))
    pk = inquiry.id

    await db.delete(inquiry)
    await db.commit()

    logger.info(f"Обращение удалено: id={pk} (admin: {current_user.username})")

    return MessageResponse(message="Inquiry deleted successfully")
