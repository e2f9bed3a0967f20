# -*- coding: utf-8 -*-
"""Аутентификация администраторов: JWT и FastAPI зависимости."""

from site_admin.auth.dependencies import CurrentUser, get_current_user, require_admin
from site_admin.auth.jwt import create_access_token, hash_password, verify_password, verify_token

__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_admin",
    "create_access_token",
    "hash_password",
    "verify_password",
    "verify_token",
]
