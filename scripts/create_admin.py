"""
Скрипт для создания администратора сайта.

Если пользователь с таким логином уже есть, ему выставляется
роль Admin и новый пароль.

Использование:
    python scripts/create_admin.py
"""

import asyncio
import getpass
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select

from site_admin.auth.jwt import hash_password
from site_admin.database import async_session_factory, engine
from site_admin.db.models import ROLE_ADMIN, User

MIN_PASSWORD_LENGTH = 6


async def create_admin() -> None:
    """Создаёт или обновляет администратора."""
    print("=" * 60)
    print("Создание администратора сайта")
    print("=" * 60)

    username = input("\n👤 Логин: ").strip()
    if not username:
        print("❌ Ошибка: логин не может быть пустым")
        return

    name = input("📝 Отображаемое имя (Enter: как логин): ").strip() or username
    email = input("📧 Email (необязательно): ").strip() or None

    password = getpass.getpass(f"🔑 Пароль (минимум {MIN_PASSWORD_LENGTH} символов): ").strip()
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"❌ Ошибка: пароль должен быть не менее {MIN_PASSWORD_LENGTH} символов")
        return

    if password != getpass.getpass("🔑 Подтвердите пароль: ").strip():
        print("❌ Ошибка: пароли не совпадают")
        return

    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

        if user:
            print(f"⚠️  Пользователь '{username}' уже существует, обновляем роль и пароль...")
            user.role = ROLE_ADMIN
            user.password_hash = hash_password(password)
            user.name = name
            if email:
                user.email = email
        else:
            user = User(
                name=name,
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=ROLE_ADMIN,
            )
            session.add(user)

        await session.commit()

    await engine.dispose()

    print("\n" + "=" * 60)
    print(f"✅ Администратор '{username}' готов")
    print("=" * 60)


if __name__ == "__main__":
    try:
        asyncio.run(create_admin())
    except KeyboardInterrupt:
        print("\n\n❌ Прервано пользователем")
