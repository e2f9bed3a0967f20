# -*- coding: utf-8 -*-
"""
API роутер фотогалереи.

Эндпоинты:
- GET / - Список фотографий (?max_limit=)
- POST / - Загрузить одну или несколько фотографий
- POST /{id} - Обновить фотографию (форма)
- PUT / - Обновить фотографию (?id= или поле формы id)
- DELETE /?id= - Удалить фотографию
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.dependencies import CurrentUser, require_admin
from site_admin.config import site_settings
from site_admin.database import get_db_session
from site_admin.db.models import GalleryItem
from site_admin.models.common import MessageResponse
from site_admin.models.gallery import GalleryDataResponse, GalleryItemResponse, GalleryUploadResponse
from site_admin.routers.params import bad_request, not_found, require_id
from site_admin.services.images import (
    HTTP_413_TOO_LARGE,
    ImageStorage,
    ImageStorageError,
    ImageUpload,
    commit_with_image,
    delete_with_image,
    get_gallery_storage,
    update_with_image,
)
from site_admin.utils.security import clean_text, parse_int

router = APIRouter()
logger = logging.getLogger("site_admin.routers.gallery")


async def get_item_or_404(db: AsyncSession, item_id: int) -> GalleryItem:
    item = await db.get(GalleryItem, item_id)
    if item is None:
        raise not_found("gallery item not found")
    return item


@router.get("/", response_model=list[GalleryItemResponse])
async def list_gallery(
    max_limit: Optional[str] = Query(None, description="Максимум записей (0 или пусто: все)"),
    db: AsyncSession = Depends(get_db_session),
):
    """Фотографии галереи, новые первыми."""
    try:
        limit = parse_int(max_limit)
    except ValueError:
        limit = None

    query = select(GalleryItem).order_by(GalleryItem.created_at.desc(), GalleryItem.id.desc())
    if limit and limit > 0:
        query = query.limit(limit)

    result = await db.execute(query)
    return [GalleryItemResponse.model_validate(item) for item in result.scalars().all()]


@router.post("/", response_model=GalleryUploadResponse)
async def upload_gallery_images(
    title: str = Form(""),
    images: Optional[list[UploadFile]] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_gallery_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Пакетная загрузка фотографий.

    Каждый файл становится отдельной записью с общим заголовком.
    Неудачные файлы пропускаются; если не сохранился ни один, ответ 500.
    """
    # rollback после ошибки файла expire-ит все объекты сессии, включая пользователя
    admin_name = current_user.username
    title = clean_text(title)
    files = [f for f in (images or []) if f.filename]
    if not files:
        raise bad_request("no images uploaded")

    uploads: list[ImageUpload] = []
    total_size = 0
    for upload in files:
        data = await upload.read()
        total_size += len(data)
        if total_size > site_settings.max_gallery_upload_bytes:
            raise HTTPException(
                status_code=HTTP_413_TOO_LARGE,
                detail=f"files too large: limit is {site_settings.MAX_GALLERY_UPLOAD_MB} MB per upload",
            )
        uploads.append(ImageUpload(filename=upload.filename, data=data))

    saved = 0
    for image in uploads:
        if not storage.is_allowed(image.filename):
            logger.warning(f"Пропущен файл {image.filename}: недопустимое расширение")
            continue

        item = GalleryItem(title=title)
        try:
            await commit_with_image(db, storage, item, title, image)
        except ImageStorageError as e:
            logger.error(f"Не удалось сохранить {image.filename}: {e}")
            continue
        except SQLAlchemyError as e:
            logger.error(f"Ошибка БД при сохранении {image.filename}: {e}")
            await db.rollback()
            continue
        saved += 1

    if saved == 0:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to save any images",
        )

    logger.info(f"В галерею загружено {saved} из {len(uploads)} фото (admin: {admin_name})")

    return GalleryUploadResponse(message=f"{saved} images uploaded successfully", count=saved)


async def _update_item(
    raw_id: Optional[str],
    title: str,
    image_file: Optional[UploadFile],
    current_user: CurrentUser,
    storage: ImageStorage,
    db: AsyncSession,
) -> GalleryDataResponse:
    item_id = require_id(raw_id, "invalid or missing id")
    item = await get_item_or_404(db, item_id)
    image = await storage.read_upload(image_file)

    title = clean_text(title)
    if title:
        item.title = title

    await update_with_image(db, storage, item, item.title, image)
    await db.refresh(item)

    logger.info(f"Фото галереи обновлено: id={item_id} (admin: {current_user.username})")

    return GalleryDataResponse(
        message="Gallery item updated successfully",
        data=GalleryItemResponse.model_validate(item),
    )


@router.post("/{item_id}", response_model=GalleryDataResponse)
async def update_gallery_item_by_path(
    item_id: str,
    title: str = Form(""),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_gallery_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """Обновление фотографии, ID в пути."""
    return await _update_item(item_id, title, image, current_user, storage, db)


@router.put("/", response_model=GalleryDataResponse)
async def update_gallery_item(
    query_id: Optional[str] = Query(None, alias="id"),
    form_id: Optional[str] = Form(None, alias="id"),
    title: str = Form(""),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_gallery_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """Обновление фотографии, ID в query параметре или в поле формы."""
    raw_id = query_id if query_id else form_id
    return await _update_item(raw_id, title, image, current_user, storage, db)


@router.delete("/", response_model=MessageResponse)
async def delete_gallery_item(
    item_id: Optional[str] = Query(None, alias="id"),
    current_user: CurrentUser = Depends(require_admin),
    storage: ImageStorage = Depends(get_gallery_storage),
    db: AsyncSession = Depends(get_db_session),
):
    """Удаление фотографии и её файла."""
    pk = require_id(item_id, "invalid or missing id")
    item = await get_item_or_404(db, pk)

    await delete_with_image(db, storage, item)

    logger.info(f"Фото галереи удалено: id={pk} (admin: {current_user.username})")

    return MessageResponse(message="Gallery item deleted successfully")
