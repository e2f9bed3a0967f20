# -*- coding: utf-8 -*-
"""
Точка входа FastAPI приложения бэкенда сайта.

Запуск:
    uvicorn site_admin.main:app --host 0.0.0.0 --port 8080 --reload
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from site_admin.config import site_settings
from site_admin.database import close_db, init_db
from site_admin.services.images import IMAGES_URL_PREFIX, ImageStorageError

API_PREFIX = "/api/v1"


# Настройка логирования
def setup_logging() -> None:
    """Настраивает логирование: консоль + файл с ротацией."""

    # Создаём директорию для логов
    log_dir = Path(site_settings.LOG_FILE).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_level = getattr(logging, site_settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Повторный импорт модуля не должен дублировать хэндлеры
    if any(getattr(h, "_site_admin", False) for h in root_logger.handlers):
        return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler._site_admin = True
    root_logger.addHandler(console_handler)

    file_handler = RotatingFileHandler(
        site_settings.LOG_FILE,
        maxBytes=site_settings.LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=site_settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(log_level)
    file_handler._site_admin = True
    root_logger.addHandler(file_handler)


setup_logging()
logger = logging.getLogger("site_admin.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Жизненный цикл приложения.

    При старте проверяет БД и создаёт папку изображений,
    при остановке закрывает пул соединений.
    """
    logger.info("Запуск бэкенда сайта...")
    logger.info(f"Версия: {site_settings.APP_VERSION}, окружение: {site_settings.ENVIRONMENT}")

    Path(site_settings.IMAGES_DIR).mkdir(parents=True, exist_ok=True)

    try:
        await init_db()
    except Exception as e:
        logger.error(f"Ошибка инициализации БД: {e}")
        raise

    logger.info(f"Бэкенд запущен на http://{site_settings.HOST}:{site_settings.PORT}")

    yield

    logger.info("Остановка бэкенда...")
    await close_db()
    logger.info("Бэкенд остановлен")


app = FastAPI(
    title=site_settings.APP_NAME,
    version=site_settings.APP_VERSION,
    description="REST API администрирования сайта: клиенты, команды, галерея, обращения",
    docs_url="/api/docs" if site_settings.DEBUG else None,
    redoc_url="/api/redoc" if site_settings.DEBUG else None,
    openapi_url="/api/openapi.json" if site_settings.DEBUG else None,
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=site_settings.cors_origins_list,
    allow_credentials="*" not in site_settings.cors_origins_list,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Логирует метод, путь, статус и длительность запроса."""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)")
    return response


# ==================== Обработчики ошибок ====================

def error_response(status_code: int, message: str) -> JSONResponse:
    """Единый формат ошибки: {"error": true, "message": ...}."""
    content = {"error": True, "message": message}
    if status_code == 404:
        content["status"] = "not_found"
    elif status_code >= 500:
        content["status"] = "server_error"
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации запроса отдаются как 400 с читаемым сообщением."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = error.get("msg", "invalid value")
        messages.append(f"{location}: {text}" if location else text)
    return error_response(400, "; ".join(messages) or "invalid request payload")


@app.exception_handler(ImageStorageError)
async def image_storage_exception_handler(request: Request, exc: ImageStorageError):
    logger.error(f"Ошибка хранилища изображений: {exc}")
    return error_response(500, "server storage error")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Глобальный обработчик необработанных исключений."""
    logger.error(f"Необработанное исключение: {exc}", exc_info=True)
    return error_response(500, "internal server error")


# ==================== Роутеры ====================

def register_routers() -> None:
    """Регистрирует все API роутеры под /api/v1."""
    from site_admin.routers import auth, clients, gallery, inquiries, members, system, teams

    app.include_router(system.router, prefix=API_PREFIX, tags=["System"])
    app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Authentication"])
    app.include_router(clients.router, prefix=f"{API_PREFIX}/client", tags=["Clients"])
    app.include_router(teams.router, prefix=f"{API_PREFIX}/team", tags=["Teams"])
    app.include_router(members.router, prefix=f"{API_PREFIX}/member", tags=["Members"])
    app.include_router(gallery.router, prefix=f"{API_PREFIX}/gallery", tags=["Gallery"])
    app.include_router(inquiries.router, prefix=f"{API_PREFIX}/inquiry", tags=["Inquiries"])


register_routers()

# Загруженные изображения: /api/v1/images/<category>/<filename>
app.mount(
    IMAGES_URL_PREFIX,
    StaticFiles(directory=site_settings.IMAGES_DIR, check_dir=False),
    name="images",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "site_admin.main:app",
        host=site_settings.HOST,
        port=site_settings.PORT,
        reload=site_settings.DEBUG,
        log_level=site_settings.LOG_LEVEL.lower(),
    )
