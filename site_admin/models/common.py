# -*- coding: utf-8 -*-
"""
Общие схемы ответов.

Все ответы API содержат флаг error и человекочитаемое сообщение.
"""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Ответ без данных."""
    error: bool = Field(False, description="Признак ошибки")
    message: str = Field(..., description="Сообщение")


class CreatedResponse(MessageResponse):
    """Ответ на создание сущности."""
    id: int = Field(..., description="ID созданной записи")
