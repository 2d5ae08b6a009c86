"""Токенайзер заголовка Netpbm.

Читает сигнатуру формата, затем побайтно сканирует ширину, высоту и
(для не битовых форматов) max value. Возвращает заголовок и смещение,
с которого начинаются данные пикселей.

Принципы:
- SRP: только заголовок; данные пикселей разбирает `DecodeService`.
- Состояние сканера явное: позиция в `ByteCursor`, режим в `_ScanState`.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, List, Optional

from pnmview.errors import TruncatedHeaderError, UnrecognizedFormatTagError
from pnmview.models.image_model import FormatVariant, Header

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(b" \n\r")
COMMENT_START = ord("#")
COMMENT_END = frozenset(b"#\r\n")

_INT_MAX = 2**31 - 1
_DECIMAL = re.compile(rb"\+?[0-9]+")


def parse_decimal(token: bytes) -> int:
    """Десятичное число из токена; всё нечисловое даёт 0."""
    if not _DECIMAL.fullmatch(token):
        return 0
    value = int(token)
    return value if value <= _INT_MAX else 0


class ByteCursor:
    """Позиция в потоке с просмотром одного байта вперёд."""

    def __init__(self, stream: BinaryIO, position: int = 0) -> None:
        self._stream = stream
        self._lookahead: Optional[int] = None
        self.position = position

    def peek(self) -> Optional[int]:
        if self._lookahead is None:
            chunk = self._stream.read(1)
            if not chunk:
                return None
            self._lookahead = chunk[0]
        return self._lookahead

    def advance(self) -> Optional[int]:
        byte = self.peek()
        if byte is not None:
            self._lookahead = None
            self.position += 1
        return byte


class _ScanState(Enum):
    SKIP_WHITESPACE = 0
    TOKEN = 1
    COMMENT = 2


@dataclass(frozen=True)
class HeaderScan:
    header: Header
    data_offset: int


def read_tag(cursor: ByteCursor) -> bytes:
    tag = bytearray()
    while len(tag) < 2:
        byte = cursor.advance()
        if byte is None:
            raise TruncatedHeaderError("Файл короче двухбайтовой сигнатуры формата")
        tag.append(byte)
    return bytes(tag)


def scan_fields(cursor: ByteCursor, required: int) -> List[int]:
    """Сканирует `required` числовых полей заголовка.

    Поле считается заданным, когда оно ненулевое; токен записывается в первое
    ещё не заданное поле. Токен завершают только пробел, LF и CR; комментарий
    внутри токена пропускается, после него токен продолжается. Останавливается
    сразу после пробельного байта, завершившего последний нужный токен, либо
    на конце потока.
    """
    values = [0] * required
    token = bytearray()
    state = _ScanState.SKIP_WHITESPACE
    resume = state

    def complete_token() -> None:
        number = parse_decimal(bytes(token))
        token.clear()
        for index, current in enumerate(values):
            if current == 0:
                values[index] = number
                break

    while not all(values):
        byte = cursor.advance()
        if byte is None:
            if token:
                complete_token()
            break

        if state is _ScanState.COMMENT:
            if byte in COMMENT_END:
                state = resume
            continue

        if byte == COMMENT_START:
            resume = state
            state = _ScanState.COMMENT
            continue

        if byte in WHITESPACE:
            if state is _ScanState.TOKEN:
                complete_token()
            state = _ScanState.SKIP_WHITESPACE
            continue

        token.append(byte)
        state = _ScanState.TOKEN

    return values


class HeaderService:
    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def read_header(self, stream: BinaryIO) -> HeaderScan:
        """Читает заголовок с начала потока.

        Args:
            stream: Бинарный поток, позиционированный на начало файла.

        Returns:
            `HeaderScan` с заголовком и смещением первого байта данных.

        Raises:
            TruncatedHeaderError: поток короче двух байт; в строгом режиме также
                если поля заголовка не заполнены.
            UnrecognizedFormatTagError: только в строгом режиме.
        """
        cursor = ByteCursor(stream)
        tag = read_tag(cursor)
        variant = FormatVariant.from_tag(tag)
        if variant is FormatVariant.INVALID:
            if self._strict:
                raise UnrecognizedFormatTagError(tag)
            logger.warning("Unrecognized format tag %r, scanning header anyway", tag)

        required = 2 if variant.is_bitmap else 3
        values = scan_fields(cursor, required)
        width, height = values[0], values[1]
        max_value = values[2] if required == 3 else 0
        header = Header(variant=variant, width=width, height=height, max_value=max_value)

        if not header.is_complete:
            if self._strict:
                raise TruncatedHeaderError(
                    f"Неполный заголовок {variant.tag}: {width}x{height}, max={max_value}"
                )
            logger.warning("Incomplete header, missing fields default to zero: %s", header)

        logger.debug("Header %s, pixel data at offset %d", header, cursor.position)
        return HeaderScan(header=header, data_offset=cursor.position)
