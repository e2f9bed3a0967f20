# -*- coding: utf-8 -*-
"""
FastAPI зависимости для авторизации администратора.

Все отказы возвращают 401: отсутствующий или битый заголовок,
невалидный или истёкший токен, удалённый пользователь, роль не Admin.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.jwt import TOKEN_TYPE_ACCESS, verify_token
from site_admin.database import get_db_session
from site_admin.db.models import ROLE_ADMIN, User

# Схема авторизации Bearer token
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


class CurrentUser:
    """
    Контекст текущего авторизованного пользователя.

    Содержит строку пользователя из БД и claims из токена.
    """
    def __init__(self, user: User, claims: dict):
        self.user = user
        self.claims = claims

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def username(self) -> str:
        return self.user.username

    @property
    def role(self) -> str:
        return self.user.role

    @property
    def is_admin(self) -> bool:
        return self.user.role == ROLE_ADMIN


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> CurrentUser:
    """
    Получает текущего пользователя из заголовка Authorization: Bearer <token>.

    Raises:
        HTTPException 401: токен отсутствует, невалиден или пользователь не найден
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("authorization token required")

    claims = verify_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("invalid or expired token")

    if claims.get("type") != TOKEN_TYPE_ACCESS:
        raise _unauthorized("invalid token type")

    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("invalid token subject")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _unauthorized("user not found")

    return CurrentUser(user=user, claims=claims)


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    Проверяет, что текущий пользователь является администратором.

    Роль берётся из БД, а не из токена: понижение роли действует сразу.
    """
    if not current_user.is_admin:
        raise _unauthorized("admin access required")
    return current_user
