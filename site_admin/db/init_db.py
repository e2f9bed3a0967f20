"""
Утилита для инициализации базы данных.
Создаёт все таблицы согласно моделям SQLAlchemy.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from site_admin.db.base import Base

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Создаёт все таблицы в базе данных согласно моделям.

    Внимание: в продакшене используйте Alembic (alembic upgrade head)!
    Функция нужна для первоначальной настройки и для тестов.
    """
    # Импорт регистрирует модели в Base.metadata
    from site_admin.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Таблицы созданы успешно")


async def create_schema() -> None:
    """Создаёт таблицы в базе из настроек приложения."""
    from site_admin.database import engine

    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    """
    Запуск инициализации БД из командной строки.

    Использование:
        python -m site_admin.db.init_db
    """
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_schema())
