"""Модели данных для изображений Netpbm.

Принципы:
- SRP: только структура данных, без логики декодирования.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional, Tuple


class FormatVariant(Enum):
    """Вариант формата, определяется только двумя первыми байтами файла."""
    ASCII_BITMAP = b"P1"
    ASCII_GRAYMAP = b"P2"
    ASCII_PIXMAP = b"P3"
    BINARY_BITMAP = b"P4"
    BINARY_GRAYMAP = b"P5"
    BINARY_PIXMAP = b"P6"
    INVALID = b""

    @classmethod
    def from_tag(cls, tag: bytes) -> "FormatVariant":
        if len(tag) == 2:
            for variant in cls:
                if variant.value == tag:
                    return variant
        return cls.INVALID

    @property
    def tag(self) -> str:
        return self.value.decode("ascii") if self.value else "??"

    @property
    def is_ascii(self) -> bool:
        return self in (FormatVariant.ASCII_BITMAP, FormatVariant.ASCII_GRAYMAP, FormatVariant.ASCII_PIXMAP)

    @property
    def is_binary(self) -> bool:
        return self in (FormatVariant.BINARY_BITMAP, FormatVariant.BINARY_GRAYMAP, FormatVariant.BINARY_PIXMAP)

    @property
    def is_bitmap(self) -> bool:
        """Битовые форматы (P1/P4) не объявляют max value."""
        return self in (FormatVariant.ASCII_BITMAP, FormatVariant.BINARY_BITMAP)


class Sample(NamedTuple):
    """Один пиксель: тройка интенсивностей каналов."""
    r: int
    g: int
    b: int

    @classmethod
    def gray(cls, value: int) -> "Sample":
        return cls(value, value, value)


BLACK = Sample(0, 0, 0)
WHITE = Sample(255, 255, 255)


@dataclass(frozen=True)
class Header:
    """Заголовок файла.

    Fields:
        variant: Вариант формата.
        width: Ширина, px (0, если не прочитана).
        height: Высота, px (0, если не прочитана).
        max_value: Максимум на канал; 0 для битовых форматов.
    """
    variant: FormatVariant
    width: int = 0
    height: int = 0
    max_value: int = 0

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def requires_max_value(self) -> bool:
        return not self.variant.is_bitmap

    @property
    def is_complete(self) -> bool:
        if self.width == 0 or self.height == 0:
            return False
        return self.max_value != 0 or not self.requires_max_value


@dataclass(frozen=True)
class PnmImage:
    """Неизменяемая пара (заголовок, семплы в порядке строк).

    Fields:
        path: Путь к исходному файлу.
        header: Заголовок, полученный токенайзером.
        samples: Семплы слева направо, сверху вниз.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    header: Header
    samples: Tuple[Sample, ...]
    size_bytes: Optional[int] = None

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height
