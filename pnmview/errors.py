"""Ошибки декодирования Netpbm.

Все ошибки наследуются от `PnmError` (это `ValueError`), так что вызывающий
код может ловить их одним `except`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union


class PnmError(ValueError):
    """Базовая ошибка декодирования."""


class UnreadableFileError(PnmError):
    def __init__(self, path: Union[str, Path], reason: str = "") -> None:
        self.path = Path(path)
        message = f"Файл недоступен для чтения: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnrecognizedFormatTagError(PnmError):
    def __init__(self, tag: bytes) -> None:
        self.tag = tag
        super().__init__(f"Неизвестная сигнатура формата: {tag!r}")


class TruncatedHeaderError(PnmError):
    """Заголовок закончился раньше, чем были прочитаны все поля."""


class TruncatedSampleDataError(PnmError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Недостаточно данных: {actual} семплов из {expected}")


class DimensionMismatchError(PnmError):
    """Количество семплов или размеры не совпадают с заголовком."""
