# -*- coding: utf-8 -*-
"""
Хранилище загруженных изображений.

Каждая сущность с картинкой (клиенты, сотрудники, галерея) хранит файлы
в своей подпапке IMAGES_DIR, а в БД лежит только имя файла (image_link).

Три сценария работы с файлами:
- создание: строка -> flush (получаем id) -> запись файла -> commit;
  если commit упал, файл удаляется
- замена: старый файл переименовывается в *_backup, пишется новый,
  выполняется обновление строки; при ошибке всё откатывается
- удаление: строка удаляется и коммитится, затем удаляется файл
"""

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from site_admin.config import site_settings
from site_admin.utils.security import safe_filename_part

logger = logging.getLogger(__name__)

CATEGORY_CLIENTS = "clients"
CATEGORY_MEMBERS = "members"
CATEGORY_GALLERY = "gallery"

IMAGES_URL_PREFIX = "/api/v1/images"

DEFAULT_EXTENSION = ".jpg"

# Content Too Large
HTTP_413_TOO_LARGE = 413

# Подпись по умолчанию, если у сущности нет имени/заголовка
DEFAULT_LABELS = {
    CATEGORY_CLIENTS: "client",
    CATEGORY_MEMBERS: "member",
    CATEGORY_GALLERY: "gallery",
}


class ImageStorageError(Exception):
    """Ошибка записи или удаления файла изображения."""


@dataclass
class ImageUpload:
    """Проверенный загруженный файл, прочитанный в память."""

    filename: str
    data: bytes


def image_url(category: str, image_link: Optional[str]) -> Optional[str]:
    """Публичный URL изображения или None, если картинки нет."""
    if not image_link:
        return None
    return f"{IMAGES_URL_PREFIX}/{category}/{image_link}"


class ImageStorage:
    """
    Папка изображений одной категории: <root>/<category>.

    Args:
        root: Корневая папка изображений (IMAGES_DIR)
        category: Подпапка (clients / members / gallery)
        max_size_bytes: Лимит размера одного файла
        allowed_extensions: Разрешённые расширения с точкой, в нижнем регистре
    """

    def __init__(
        self,
        root: Path,
        category: str,
        max_size_bytes: Optional[int] = None,
        allowed_extensions: Optional[list[str]] = None,
    ):
        self.root = Path(root)
        self.category = category
        self.max_size_bytes = max_size_bytes or site_settings.max_image_size_bytes
        self.allowed_extensions = allowed_extensions or site_settings.allowed_image_extensions_list

    @property
    def directory(self) -> Path:
        return self.root / self.category

    def path(self, filename: str) -> Path:
        # Только имя файла: компоненты пути из БД не выходят за пределы папки
        return self.directory / Path(filename).name

    def build_filename(self, entity_id: int, label: Optional[str], original_filename: Optional[str]) -> str:
        """
        Строит имя файла вида "{id}_{label}{ext}".

        Все символы подписи, кроме латиницы и цифр, заменяются на "_".
        Расширение берётся из исходного файла в нижнем регистре,
        по умолчанию ".jpg".
        """
        safe_label = safe_filename_part(label, DEFAULT_LABELS.get(self.category, self.category))
        ext = Path(original_filename or "").suffix.lower() or DEFAULT_EXTENSION
        return f"{entity_id}_{safe_label}{ext}"

    def is_allowed(self, filename: Optional[str]) -> bool:
        ext = Path(filename or "").suffix.lower() or DEFAULT_EXTENSION
        return ext in self.allowed_extensions

    async def read_upload(self, upload: Optional[UploadFile]) -> Optional[ImageUpload]:
        """
        Проверяет и читает загруженный файл.

        Returns:
            ImageUpload или None, если файл не передан

        Raises:
            HTTPException 400: недопустимое расширение
            HTTPException 413: файл больше MAX_IMAGE_SIZE_MB
        """
        if upload is None or not upload.filename:
            return None

        if not self.is_allowed(upload.filename):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"unsupported image type, allowed: {', '.join(self.allowed_extensions)}",
            )
        data = await upload.read()
        if len(data) > self.max_size_bytes:
            raise HTTPException(
                status_code=HTTP_413_TOO_LARGE,
                detail=f"image '{upload.filename}' exceeds {self.max_size_bytes // (1024 * 1024)} MB",
            )
        return ImageUpload(filename=upload.filename, data=data)

    def save(self, filename: str, data: bytes) -> Path:
        """
        Атомарно записывает файл: временный файл в той же папке + os.replace.

        Raises:
            ImageStorageError: не удалось записать файл
        """
        target = self.path(filename)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".upload_", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, target)
                os.chmod(target, 0o644)
            except OSError:
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Не удалось сохранить изображение {target}: {e}")
            raise ImageStorageError(f"failed to save image {filename}") from e

        logger.debug(f"Изображение сохранено: {target}")
        return target

    def remove(self, filename: Optional[str]) -> bool:
        """
        Удаляет файл, если он есть.

        Returns:
            True, если файл был удалён
        """
        if not filename:
            return False
        target = self.path(filename)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Не удалось удалить изображение {target}: {e}")
            return False
        return True

    @staticmethod
    def backup_name(filename: str, new_filename: Optional[str] = None) -> str:
        """
        Имя бэкапа: <base>_backup<ext>.

        Если новое имя файла совпадает с ним (подпись заканчивается на
        "backup"), берётся скрытое .<name>.bak: build_filename такое
        имя не строит.
        """
        base = Path(filename)
        name = f"{base.stem}_backup{base.suffix}"
        if new_filename is not None and name == Path(new_filename).name:
            name = f".{base.name}.bak"
        return name

    @asynccontextmanager
    async def replace(self, old_link: Optional[str], new_filename: str, data: bytes) -> AsyncIterator[Path]:
        """
        Заменяет изображение с возможностью отката.

        1. Старый файл (если есть) переименовывается в <base>_backup<ext>
        2. Записывается новый файл
        3. Выполняется тело контекста (обновление строки и commit)
        4. При успехе бэкап удаляется; при ошибке новый файл удаляется,
           бэкап возвращается на место, исключение пробрасывается
        """
        backup_path: Optional[Path] = None
        old_path: Optional[Path] = None

        if old_link:
            old_path = self.path(old_link)
            if old_path.exists():
                backup_path = self.path(self.backup_name(old_link, new_filename))
                try:
                    os.replace(old_path, backup_path)
                except OSError as e:
                    logger.error(f"Не удалось создать бэкап {old_path}: {e}")
                    raise ImageStorageError(f"failed to back up image {old_link}") from e

        try:
            new_path = self.save(new_filename, data)
            yield new_path
        except BaseException:
            self.remove(new_filename)
            if backup_path is not None and old_path is not None:
                try:
                    os.replace(backup_path, old_path)
                except OSError as e:
                    logger.error(f"Не удалось восстановить {old_path} из бэкапа: {e}")
                else:
                    logger.warning(f"Замена изображения отменена, восстановлен {old_path.name}")
            raise

        if backup_path is not None:
            try:
                backup_path.unlink()
            except OSError as e:
                logger.warning(f"Не удалось удалить бэкап {backup_path}: {e}")


async def commit_with_image(
    db: AsyncSession,
    storage: ImageStorage,
    entity,
    label: Optional[str],
    image: Optional[ImageUpload],
) -> bool:
    """
    Сохраняет новую строку и, если передан, её файл изображения.

    Строка вставляется и flush-ится, чтобы получить id для имени файла.
    Ошибка записи файла откатывает транзакцию; ошибка commit удаляет
    уже записанный файл.

    Returns:
        True, если изображение было сохранено
    """
    db.add(entity)
    if image is None:
        await db.commit()
        return False

    await db.flush()
    filename = storage.build_filename(entity.id, label, image.filename)
    try:
        storage.save(filename, image.data)
    except ImageStorageError:
        await db.rollback()
        raise

    entity.image_link = filename
    try:
        await db.commit()
    except Exception:
        logger.warning(f"Commit не удался, удаляем записанный файл {storage.category}/{filename}")
        storage.remove(filename)
        raise
    return True


async def update_with_image(
    db: AsyncSession,
    storage: ImageStorage,
    entity,
    label: Optional[str],
    image: Optional[ImageUpload],
) -> None:
    """Коммитит изменения строки, заменяя изображение через replace()."""
    if image is None:
        await db.commit()
        return

    new_filename = storage.build_filename(entity.id, label, image.filename)
    async with storage.replace(entity.image_link, new_filename, image.data):
        entity.image_link = new_filename
        await db.commit()


async def delete_with_image(db: AsyncSession, storage: ImageStorage, entity) -> None:
    """Удаляет строку, затем её файл изображения."""
    image_link = entity.image_link
    await db.delete(entity)
    await db.commit()

    if image_link and not storage.remove(image_link):
        logger.warning(f"Файл изображения не найден при удалении: {storage.category}/{image_link}")


def get_images_root() -> Path:
    """Dependency: корневая папка изображений."""
    return Path(site_settings.IMAGES_DIR)


def image_storage_dependency(category: str):
    """Создаёт FastAPI dependency, возвращающую хранилище категории."""

    def dependency(root: Path = Depends(get_images_root)) -> ImageStorage:
        return ImageStorage(root, category)

    dependency.__name__ = f"get_{category}_storage"
    return dependency


get_client_storage = image_storage_dependency(CATEGORY_CLIENTS)
get_member_storage = image_storage_dependency(CATEGORY_MEMBERS)
get_gallery_storage = image_storage_dependency(CATEGORY_GALLERY)
