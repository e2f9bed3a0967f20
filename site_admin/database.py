# -*- coding: utf-8 -*-
"""
Модуль работы с базой данных.

Предоставляет асинхронный движок SQLAlchemy и сессии для FastAPI,
а также проверку схемы при старте приложения.
"""

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from site_admin.config import site_settings
from site_admin.db import Base

logger = logging.getLogger(__name__)


def build_engine(url: str) -> AsyncEngine:
    """
    Создаёт асинхронный движок.

    Настройки пула применяются только к серверным БД: SQLite
    (aiosqlite) работает без пула соединений.
    """
    options = {"echo": site_settings.DEBUG}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=site_settings.DB_POOL_SIZE,
            max_overflow=site_settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return create_async_engine(url, **options)


engine = build_engine(site_settings.database_url)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency для получения сессии БД в FastAPI.

    Коммит выполняют сами эндпоинты: для загрузки изображений важно
    знать, удался ли коммит, до отправки ответа.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Ошибка в сессии БД: {e}")
            await session.rollback()
            raise


async def missing_tables(conn: AsyncConnection) -> list[str]:
    """Таблицы моделей, которых нет в базе."""
    existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    return sorted(set(Base.metadata.tables) - existing)


async def init_db(db_engine: Optional[AsyncEngine] = None) -> list[str]:
    """
    Проверяет подключение и схему при старте приложения.

    Отсутствующие таблицы не останавливают запуск: они логируются,
    чтобы было видно, что миграции не применены.

    Returns:
        Список отсутствующих таблиц (пустой, если схема на месте)

    Raises:
        Exception: если подключиться не удалось
    """
    db_engine = db_engine or engine
    try:
        async with db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            missing = await missing_tables(conn)
    except Exception as e:
        logger.error(f"Не удалось подключиться к базе данных: {e}")
        raise

    logger.info(f"Подключение к базе данных установлено ({db_engine.dialect.name})")
    if missing:
        logger.warning(
            f"В базе нет таблиц: {', '.join(missing)}. Выполните: alembic upgrade head"
        )
    return missing


async def close_db() -> None:
    """Закрывает пул соединений при остановке приложения."""
    await engine.dispose()
    logger.info("Подключение к базе данных закрыто")
