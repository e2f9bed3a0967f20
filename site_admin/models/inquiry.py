# -*- coding: utf-8 -*-
"""
Pydantic схемы для обращений посетителей сайта.
"""

from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from site_admin.utils.security import clean_text


def _normalize_email(value: Optional[str]) -> Optional[str]:
    # Пустое значение пропускаем: обязательность проверяет эндпоинт
    value = clean_text(value)
    if not value:
        return value
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        raise ValueError("invalid email address")


class InquiryCreate(BaseModel):
    """Обращение с публичной формы сайта. Все поля обязательны."""
    name: str = Field("", max_length=255)
    mobile: str = Field("", max_length=64)
    email: str = Field("", max_length=255)
    subject: str = Field("", max_length=255)
    message: str = Field("", max_length=5000)

    @field_validator("name", "mobile", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v):
        return clean_text(v) if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return _normalize_email(v) if isinstance(v, str) else v

    def has_all_fields(self) -> bool:
        return all((self.name, self.mobile, self.email, self.subject, self.message))


class InquiryUpdate(BaseModel):
    """Частичное обновление обращения: применяются только непустые поля."""
    name: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    status: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return _normalize_email(v) if isinstance(v, str) else v


class InquiryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    inquiry_date: datetime
    name: str
    mobile: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class InquiryCounts(BaseModel):
    """Количество обращений по статусам (оба ключа всегда есть)."""
    NEW: int = 0
    RESOLVED: int = 0


class InquiryListResponse(BaseModel):
    inquiries: list[InquiryResponse]
    counts: InquiryCounts


class InquiryDataResponse(BaseModel):
    error: bool = False
    message: str
    data: InquiryResponse
