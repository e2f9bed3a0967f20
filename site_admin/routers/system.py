# -*- coding: utf-8 -*-
"""
Системные эндпоинты.

Эндпоинты:
- GET /ping - Окружение и исходящий IP сервера
- GET /health - Проверка работоспособности
"""

import logging
import socket

from fastapi import APIRouter

from site_admin.config import site_settings

router = APIRouter()
logger = logging.getLogger("site_admin.routers.system")


def get_outbound_ip() -> str:
    """
    IP адрес, с которого сервер ходит наружу.

    UDP connect не отправляет пакетов, только выбирает маршрут.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            return sock.getsockname()[0]
    except OSError as e:
        logger.debug(f"Не удалось определить исходящий IP: {e}")
        return "unknown"


@router.get("/ping")
async def ping():
    """Окружение и IP сервера."""
    return {"status": site_settings.ENVIRONMENT, "server_ip": get_outbound_ip()}


@router.get("/health")
async def health_check():
    """Проверка работоспособности сервиса."""
    return {"status": "ok", "version": site_settings.APP_VERSION}
