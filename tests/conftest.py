# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Окружение задаётся до импорта site_admin: настройки читаются при импорте.
# БД подменяется на SQLite (aiosqlite) в tmp_path, папка изображений тоже.
# =============================================================================

import asyncio
import os
import tempfile

_TMP_ROOT = tempfile.mkdtemp(prefix="site_admin_tests_")

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-123")
os.environ.setdefault("LOG_FILE", os.path.join(_TMP_ROOT, "logs", "site_admin.log"))
# Тесты раздачи статики пишут прямо в IMAGES_DIR
os.environ["IMAGES_DIR"] = os.path.join(_TMP_ROOT, "images")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from site_admin.auth.jwt import create_access_token, hash_password
from site_admin.database import get_db_session
from site_admin.db.init_db import create_tables
from site_admin.db.models import ROLE_ADMIN, User
from site_admin.main import app
from site_admin.services.images import get_images_root

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    """Хэш считается один раз: PBKDF2 с 310k раундов медленный."""
    return hash_password(ADMIN_PASSWORD)


@pytest.fixture
def session_factory(tmp_path):
    """Фабрика сессий к чистой SQLite базе."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(create_tables(engine))
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory
    asyncio.run(engine.dispose())


@pytest.fixture
def images_root(tmp_path):
    root = tmp_path / "images"
    root.mkdir()
    return root


@pytest.fixture
def client(session_factory, images_root):
    """TestClient без lifespan: PostgreSQL в тестах не нужен."""

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_images_root] = lambda: images_root
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def run_db(session_factory):
    """Выполняет корутину fn(session) в отдельной сессии и возвращает результат."""

    def runner(fn):
        async def _run():
            async with session_factory() as session:
                return await fn(session)

        return asyncio.run(_run())

    return runner


def _add_user(run_db, password_hash, username, role):
    async def _create(session):
        user = User(
            name=username.title(),
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            role=role,
        )
        session.add(user)
        await session.commit()
        return user.id

    return run_db(_create)


@pytest.fixture
def admin_user_id(run_db, admin_password_hash):
    return _add_user(run_db, admin_password_hash, ADMIN_USERNAME, ROLE_ADMIN)


@pytest.fixture
def editor_user_id(run_db, admin_password_hash):
    """Пользователь без роли Admin."""
    return _add_user(run_db, admin_password_hash, "editor", "Editor")


@pytest.fixture
def admin_headers(admin_user_id):
    token = create_access_token(
        user_id=admin_user_id,
        name="Admin",
        username=ADMIN_USERNAME,
        role=ROLE_ADMIN,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def png_bytes() -> bytes:
    """Минимальное содержимое файла изображения (сервер не декодирует картинки)."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
