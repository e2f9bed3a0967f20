# -*- coding: utf-8 -*-
"""
Pydantic схемы для галереи.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field

from site_admin.services.images import CATEGORY_GALLERY, image_url as build_image_url


class GalleryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str = ""
    image_link: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def image_url(self) -> Optional[str]:
        return build_image_url(CATEGORY_GALLERY, self.image_link)


class GalleryUploadResponse(BaseModel):
    """Результат пакетной загрузки."""
    error: bool = False
    message: str
    count: int


class GalleryDataResponse(BaseModel):
    error: bool = False
    message: str
    data: GalleryItemResponse
