# -*- coding: utf-8 -*-
"""
JWT токены и пароли администраторов.

Реализует:
- Хэширование паролей (PBKDF2-SHA256)
- Генерацию access токена с claims администратора
- Проверку токена (подпись, срок, issuer, audience)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from site_admin.config import site_settings

TOKEN_TYPE_ACCESS = "access"

# PBKDF2-SHA256 не требует бинарного пакета bcrypt
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__default_rounds=310_000,
)


def hash_password(password: str) -> str:
    """
    Хэширует пароль.

    Args:
        password: Пароль в открытом виде

    Returns:
        Хэш пароля
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверяет соответствие пароля хэшу.

    Битый или пустой хэш считается несовпадением.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    name: str,
    username: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Создаёт JWT access token администратора.

    Args:
        user_id: ID пользователя (кладётся в sub строкой)
        name: Отображаемое имя
        username: Логин
        role: Роль пользователя
        expires_delta: Время жизни токена (по умолчанию из настроек)

    Returns:
        Подписанный JWT
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=site_settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": str(user_id),
        "name": name,
        "username": username,
        "role": role,
        "iss": site_settings.JWT_ISSUER,
        "aud": site_settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + expires_delta,
        "type": TOKEN_TYPE_ACCESS,
    }

    return jwt.encode(
        claims,
        site_settings.JWT_SECRET,
        algorithm=site_settings.JWT_ALGORITHM,
    )


def verify_token(token: str) -> Optional[dict[str, Any]]:
    """
    Проверяет и декодирует JWT токен.

    Args:
        token: JWT токен

    Returns:
        Claims токена или None, если токен невалидный или истёк
    """
    try:
        return jwt.decode(
            token,
            site_settings.JWT_SECRET,
            algorithms=[site_settings.JWT_ALGORITHM],
            audience=site_settings.JWT_AUDIENCE,
            issuer=site_settings.JWT_ISSUER,
        )
    except JWTError:
        return None
