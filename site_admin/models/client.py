# -*- coding: utf-8 -*-
"""
Pydantic схемы для клиентов.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from site_admin.services.images import CATEGORY_CLIENTS, image_url as build_image_url


class ClientResponse(BaseModel):
    """Клиент компании."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    area: str
    service_name: str = ""
    service_date: str = ""
    status: str = ""
    note: str = ""
    image_link: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def image_url(self) -> Optional[str]:
        return build_image_url(CATEGORY_CLIENTS, self.image_link)


class ClientListResponse(BaseModel):
    error: bool = False
    message: str
    clients: list[ClientResponse]


class ClientDataResponse(BaseModel):
    error: bool = False
    message: str
    data: ClientResponse


class ClientMetricsResponse(BaseModel):
    """Сводные показатели по клиентам."""
    total_distinct_clients: int = Field(0, description="Количество уникальных клиентов по имени")
    active_projects: int = Field(0, description="Проекты со статусом Active")
    completed_projects: int = Field(0, description="Проекты со статусом Completed")
