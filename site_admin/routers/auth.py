# -*- coding: utf-8 -*-
"""
API роутер аутентификации.

Эндпоинты:
- POST /signin - Вход по логину/паролю
- PATCH /admin/reset-password - Смена собственного пароля
- GET /me - Текущий пользователь
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.auth.dependencies import CurrentUser, require_admin
from site_admin.auth.jwt import create_access_token, hash_password, verify_password
from site_admin.database import get_db_session
from site_admin.db.models import ROLE_ADMIN, User
from site_admin.models.auth import ResetPasswordRequest, SigninRequest, SigninResponse, UserResponse
from site_admin.models.common import MessageResponse

router = APIRouter()
logger = logging.getLogger("site_admin.routers.auth")

MIN_PASSWORD_LENGTH = 6


@router.post("/signin", response_model=SigninResponse)
async def signin(
    data: SigninRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Вход по логину и паролю.

    Неизвестный логин и неверный пароль дают одинаковый ответ,
    чтобы нельзя было перебирать существующие логины.
    """
    username = data.username.strip()
    password = data.password.strip()

    if not username or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="username and password are required",
        )

    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Неудачная попытка входа: {username}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid username or password",
        )

    if user.role != ROLE_ADMIN:
        logger.warning(f"Вход без прав администратора: {username} (роль {user.role})")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="access denied: admin role required",
        )

    token = create_access_token(
        user_id=user.id,
        name=user.name,
        username=user.username,
        role=user.role,
    )

    logger.info(f"Успешный вход: {username}")

    return SigninResponse(
        accessToken=token,
        user=UserResponse.model_validate(user),
    )


@router.patch("/admin/reset-password", response_model=MessageResponse)
async def reset_password(
    data: ResetPasswordRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Смена пароля текущего администратора.

    Пользователь определяется по токену, а не по телу запроса.
    """
    new_password = data.new_password.strip()
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"new password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    current_user.user.password_hash = hash_password(new_password)
    await db.commit()

    logger.info(f"Пользователь {current_user.username} (id={current_user.id}) сменил пароль")

    return MessageResponse(message="Password updated successfully.")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: CurrentUser = Depends(require_admin),
):
    """Получение информации о текущем пользователе."""
    return UserResponse.model_validate(current_user.user)
