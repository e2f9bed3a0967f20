# -*- coding: utf-8 -*-
"""
Утилиты обработки пользовательского ввода.

Содержит функции для:
- Очистки строковых полей форм
- Построения безопасных частей имён файлов
- Разбора целых чисел из query и form параметров
"""

import re
from typing import Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def clean_text(value: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Обрезает пробелы и удаляет управляющие символы.

    None превращается в пустую строку, чтобы поля ответа всегда были строками.
    """
    if not value:
        return ""
    value = _CONTROL_CHARS.sub("", value).strip()
    if max_length is not None:
        value = value[:max_length]
    return value


def safe_filename_part(value: Optional[str], default: str) -> str:
    """
    Превращает произвольную подпись в часть имени файла.

    Каждый символ, кроме латинских букв и цифр, заменяется на "_".
    Пустая подпись заменяется значением default.

    Args:
        value: Подпись (имя клиента, заголовок фото и т.п.)
        default: Значение для пустой подписи

    Returns:
        Строка, безопасная для использования в имени файла
    """
    value = (value or "").strip()
    if not value:
        return default
    return _UNSAFE_FILENAME_CHARS.sub("_", value)


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Разбирает целое число из строки параметра.

    Returns:
        Число или None, если строка пустая

    Raises:
        ValueError: строка не пустая, но не является целым числом
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    return int(value)
