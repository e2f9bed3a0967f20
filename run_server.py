"""
Запуск бэкенда сайта.

Использование:
    python run_server.py
"""

import uvicorn

from site_admin.config import site_settings

if __name__ == "__main__":
    uvicorn.run(
        "site_admin.main:app",
        host=site_settings.HOST,
        port=site_settings.PORT,
        reload=site_settings.DEBUG,
        log_level=site_settings.LOG_LEVEL.lower(),
    )
