# -*- coding: utf-8 -*-
"""Разбор числовых параметров запроса с ответом 400 при ошибке."""

from typing import Optional

from fastapi import HTTPException, status

from site_admin.utils.security import parse_int


def bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def not_found(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


def require_id(value: Optional[str], message: str) -> int:
    """
    Возвращает положительный ID из строки параметра.

    Raises:
        HTTPException 400: параметр пустой, не число или не положительный
    """
    try:
        parsed = parse_int(value)
    except ValueError:
        raise bad_request(message)
    if parsed is None or parsed <= 0:
        raise bad_request(message)
    return parsed


def optional_int(value: Optional[str], message: str) -> Optional[int]:
    """
    Необязательный целочисленный фильтр.

    Raises:
        HTTPException 400: параметр передан, но не является целым числом
    """
    try:
        return parse_int(value)
    except ValueError:
        raise bad_request(message)
