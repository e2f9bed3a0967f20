# -*- coding: utf-8 -*-
"""
Конфигурация бэкенда сайта.

Настройки загружаются из переменных окружения и файла .env.
Использует Pydantic Settings для валидации.
"""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class SiteSettings(BaseSettings):
    """
    Настройки бэкенда.

    Все значения можно переопределить переменными окружения с тем же именем.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Основные настройки ===

    APP_NAME: str = "AJFSES Site Admin"
    APP_VERSION: str = "1.0.0"

    # development / production (отдаётся в /ping как status)
    ENVIRONMENT: str = "development"

    # Режим отладки (включает /api/docs и echo SQL)
    DEBUG: bool = False

    # === Сервер ===

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # CORS разрешённые домены (через запятую, "*": все)
    CORS_ORIGINS: str = "*"

    # === База данных ===

    # Если DATABASE_URL пустой, URL собирается из POSTGRES_*
    DATABASE_URL: str = ""

    POSTGRES_HOST: str = "localhost"
    POSTGRES_DB: str = "ajfses"
    POSTGRES_USER: str = "ajfses"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_PORT: int = 5432

    # Настройки пула соединений
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # === JWT аутентификация ===

    # Секретный ключ для подписи токенов (ОБЯЗАТЕЛЬНО сменить в продакшене!)
    JWT_SECRET: str = "CHANGE_ME_IN_PRODUCTION_super_secret_key_32_chars"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "ajfses-backend"
    JWT_AUDIENCE: str = "ajfses-admin"

    # Время жизни access token в минутах (сутки)
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # === Изображения ===

    # Корневая папка для загруженных изображений (раздаётся как /api/v1/images)
    IMAGES_DIR: str = "data/images"

    # Лимит на одно изображение клиента/сотрудника (МБ)
    MAX_IMAGE_SIZE_MB: int = 10

    # Лимит на весь запрос загрузки в галерею (МБ)
    MAX_GALLERY_UPLOAD_MB: int = 30

    # Разрешённые расширения (через запятую)
    ALLOWED_IMAGE_EXTENSIONS: str = ".jpg,.jpeg,.png,.gif,.webp"

    # === Логирование ===

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/site_admin.log"
    LOG_MAX_SIZE_MB: int = 50
    LOG_BACKUP_COUNT: int = 3

    @property
    def cors_origins_list(self) -> list[str]:
        """Возвращает список разрешённых CORS origins."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        """Список расширений в нижнем регистре, каждое с точкой."""
        result = []
        for ext in self.ALLOWED_IMAGE_EXTENSIONS.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            result.append(ext if ext.startswith(".") else f".{ext}")
        return result

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def max_gallery_upload_bytes(self) -> int:
        return self.MAX_GALLERY_UPLOAD_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def database_url(self) -> str:
        """
        Возвращает итоговый URL подключения к PostgreSQL.

        Приоритет:
        1) DATABASE_URL (если задан)
        2) Сборка из POSTGRES_*

        Логин и пароль кодируются через URL-encoding, чтобы спецсимволы
        (`@`, `&`, `:`) не ломали строку подключения. Кавычки вокруг
        пароля в .env убираются.
        """
        if self.DATABASE_URL and self.DATABASE_URL.strip():
            return self.DATABASE_URL.strip()

        user = (self.POSTGRES_USER or "").strip().strip('"').strip("'")
        password_raw = (self.POSTGRES_PASSWORD or "").strip().strip('"').strip("'")

        host = (self.POSTGRES_HOST or "localhost").strip()
        db = (self.POSTGRES_DB or "").strip()
        port = int(self.POSTGRES_PORT or 5432)

        return f"postgresql+asyncpg://{quote_plus(user)}:{quote_plus(password_raw)}@{host}:{port}/{db}"


@lru_cache()
def get_settings() -> SiteSettings:
    """
    Получает singleton экземпляр настроек.

    Кэшируется, чтобы .env читался один раз.
    """
    return SiteSettings()


# Глобальный экземпляр настроек
site_settings = get_settings()
