# -*- coding: utf-8 -*-
"""
Pydantic схемы для аутентификации администратора.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ==================== Запросы ====================

class SigninRequest(BaseModel):
    """Запрос на вход по логину/паролю."""
    username: str = Field("", max_length=255, description="Логин пользователя")
    password: str = Field("", max_length=255, description="Пароль")


class ResetPasswordRequest(BaseModel):
    """Запрос на смену собственного пароля."""
    new_password: str = Field("", max_length=255, description="Новый пароль (минимум 6 символов)")


# ==================== Ответы ====================

class UserResponse(BaseModel):
    """Данные пользователя (без хэша пароля)."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="ID пользователя")
    name: str = Field("", description="Имя")
    username: str = Field(..., description="Логин")
    email: Optional[str] = Field(None, description="Email")
    role: str = Field(..., description="Роль")
    created_at: datetime = Field(..., description="Время создания")
    updated_at: Optional[datetime] = Field(None, description="Время изменения")


class SigninResponse(BaseModel):
    """Ответ на успешный вход."""
    error: bool = Field(False, description="Признак ошибки")
    accessToken: str = Field(..., description="JWT access token")
    user: UserResponse = Field(..., description="Данные пользователя")
