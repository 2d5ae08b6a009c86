"""Загрузка файлов Netpbm (P1-P6) с диска в неизменяемый `PnmImage`.

Принципы:
- SRP: заголовок читает `HeaderService`, здесь только данные пикселей.
- OCP: каждый вариант формата декодируется своей функцией из `DECODERS`;
  функция выбирается один раз по `FormatVariant`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from pnmview.errors import (
    DimensionMismatchError,
    PnmError,
    TruncatedSampleDataError,
    UnreadableFileError,
)
from pnmview.models.image_model import BLACK, WHITE, FormatVariant, Header, PnmImage, Sample
from pnmview.services.header_service import HeaderScan, HeaderService, parse_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedBody:
    """Результат одного прохода по данным.

    Fields:
        samples: Семплы в порядке чтения.
        dropped: Сколько значений осталось в неполной тройке RGB.
        line_header: Заголовок, заново выведенный ASCII-декодером по строкам.
    """
    samples: List[Sample]
    dropped: int = 0
    line_header: Optional[Header] = None


# ---------- Преобразование значений в семплы ----------


def scale_to_255(values: Sequence[int], max_value: int) -> List[int]:
    """`int((value / max_value) * 255)` в float32, с отбрасыванием дробной части."""
    if max_value <= 0:
        return [0] * len(values)
    if isinstance(values, (bytes, bytearray)):
        arr = np.frombuffer(values, dtype=np.uint8).astype(np.float32)
    else:
        arr = np.asarray(values, dtype=np.float32)
    scaled = (arr / np.float32(max_value)) * np.float32(255.0)
    return scaled.astype(np.int64).tolist()


def graymap_samples(values: Sequence[int], max_value: int) -> List[Sample]:
    return [Sample.gray(v) for v in scale_to_255(values, max_value)]


def pixmap_samples(values: Iterable[int]) -> Tuple[List[Sample], int]:
    """Группирует значения по три; возвращает семплы и длину неполного хвоста."""
    values = list(values)
    it = iter(values)
    samples = [Sample(r, g, b) for r, g, b in zip(it, it, it)]
    return samples, len(values) % 3


def ascii_bitmap_samples(values: Iterable[int]) -> List[Sample]:
    return [BLACK if v == 0 else WHITE for v in values]


def binary_bitmap_samples(data: bytes) -> List[Sample]:
    # MSB first: bit n = (byte >> n) & 1 for n = 7..0; 1 is black
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8))
    return [BLACK if bit else WHITE for bit in bits.tolist()]


# ---------- ASCII: построчный разбор ----------


def _decode_line(raw: bytes) -> str:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("latin-1")


def scan_ascii_lines(lines: Iterable[str], variant: FormatVariant) -> Tuple[Header, List[int]]:
    """Выводит заголовок по строкам и собирает все числовые токены данных.

    Правила:
    - первая строка (сигнатура) пропускается;
    - строки, начинающиеся с `#`, пропускаются целиком;
    - пока ширина и высота не заданы, строка даёт ширину и высоту;
    - если нужен max value, следующая строка целиком читается как число;
    - в остальных строках всё после `#` отбрасывается, остаток делится на токены.
    """
    width = height = max_value = 0
    tokens: List[int] = []
    needs_max = not variant.is_bitmap

    for index, line in enumerate(lines):
        if index == 0:
            continue
        if line.startswith("#"):
            continue
        if width == 0 and height == 0:
            parts = line.split()
            if parts:
                width = parse_decimal(parts[0].encode("latin-1"))
            if len(parts) > 1:
                height = parse_decimal(parts[1].encode("latin-1"))
            continue
        if needs_max and max_value == 0:
            max_value = parse_decimal(line.strip().encode("latin-1"))
            continue
        data = line.split("#", 1)[0]
        tokens.extend(parse_decimal(t.encode("latin-1")) for t in data.split())

    header = Header(variant=variant, width=width, height=height, max_value=max_value)
    return header, tokens


def _read_ascii(handle: BinaryIO, variant: FormatVariant) -> Tuple[Header, List[int]]:
    handle.seek(0)
    return scan_ascii_lines((_decode_line(raw) for raw in handle), variant)


def decode_ascii_bitmap(handle: BinaryIO, scan: HeaderScan) -> DecodedBody:
    line_header, tokens = _read_ascii(handle, scan.header.variant)
    return DecodedBody(ascii_bitmap_samples(tokens), line_header=line_header)


def decode_ascii_graymap(handle: BinaryIO, scan: HeaderScan) -> DecodedBody:
    line_header, tokens = _read_ascii(handle, scan.header.variant)
    return DecodedBody(graymap_samples(tokens, line_header.max_value), line_header=line_header)


def decode_ascii_pixmap(handle: BinaryIO, scan: HeaderScan) -> DecodedBody:
    line_header, tokens = _read_ascii(handle, scan.header.variant)
    samples, dropped = pixmap_samples(tokens)
    return DecodedBody(samples, dropped=dropped, line_header=line_header)


# ---------- Бинарные варианты ----------


def _read_data(handle: BinaryIO, offset: int) -> bytes:
    handle.seek(offset)
    return handle.read()


def decode_binary_bitmap(handle: BinaryIO, scan: HeaderScan) -> DecodedBody:
    # padding bits of the last byte in a row are kept
    return DecodedBody(binary_bitmap_samples(_read_data(handle, scan.data_offset)))


def decode_binary_graymap(handle: BinaryIO, scan: HeaderScan) -> DecodedBody:
    data = _read_data(handle, scan.data_offset)
    return DecodedBody(graymap_samples(data, scan.header.max_value))


def decode_binary_pixmap(handle: BinaryIO, scan: HeaderScan) -> DecodedBody:
    # raw bytes, max value is not applied
    samples, dropped = pixmap_samples(_read_data(handle, scan.data_offset))
    return DecodedBody(samples, dropped=dropped)


Decoder = Callable[[BinaryIO, HeaderScan], DecodedBody]

DECODERS: Dict[FormatVariant, Decoder] = {
    FormatVariant.ASCII_BITMAP: decode_ascii_bitmap,
    FormatVariant.ASCII_GRAYMAP: decode_ascii_graymap,
    FormatVariant.ASCII_PIXMAP: decode_ascii_pixmap,
    FormatVariant.BINARY_BITMAP: decode_binary_bitmap,
    FormatVariant.BINARY_GRAYMAP: decode_binary_graymap,
    FormatVariant.BINARY_PIXMAP: decode_binary_pixmap,
}


def padded_bitmap_count(header: Header) -> int:
    """Число семплов P4 с учётом добивки строк до целого байта."""
    return (header.width + 7) // 8 * 8 * header.height


class DecodeService:
    def __init__(self, strict: bool = False) -> None:
        self._strict = strict
        self._header_service = HeaderService(strict=strict)

    def load_image(self, file_path: str | Path) -> PnmImage:
        """Загружает файл Netpbm с диска.

        Args:
            file_path: Путь до файла P1-P6.

        Returns:
            `PnmImage` с заголовком токенайзера и семплами в порядке строк.

        Raises:
            UnreadableFileError: если путь не существует, не файл или чтение упало.
            PnmError: в строгом режиме, если файл повреждён (см. `pnmview.errors`).
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise UnreadableFileError(path, "не найден")

        try:
            with path.open("rb") as handle:
                scan = self._header_service.read_header(handle)
                decoder = DECODERS.get(scan.header.variant)
                body = decoder(handle, scan) if decoder is not None else DecodedBody([])
        except OSError as exc:
            raise UnreadableFileError(path, str(exc)) from exc

        self._check(scan.header, body)

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.debug("Decoded %s: %s, %d samples", path, scan.header, len(body.samples))
        return PnmImage(path=path, header=scan.header, samples=tuple(body.samples), size_bytes=size_bytes)

    # ---- Helpers ----
    def _check(self, header: Header, body: DecodedBody) -> None:
        line_header = body.line_header
        if line_header is not None and line_header != header:
            self._report(
                DimensionMismatchError(
                    f"Заголовок по строкам {line_header.width}x{line_header.height} "
                    f"(max={line_header.max_value}) не совпадает с заголовком "
                    f"{header.width}x{header.height} (max={header.max_value})"
                )
            )

        expected = header.pixel_count
        actual = len(body.samples)
        if body.dropped:
            self._report(TruncatedSampleDataError(expected * 3, actual * 3 + body.dropped))

        if actual < expected:
            self._report(TruncatedSampleDataError(expected, actual))
        elif actual > expected:
            limit = padded_bitmap_count(header) if header.variant is FormatVariant.BINARY_BITMAP else expected
            if actual > limit:
                self._report(DimensionMismatchError(f"Лишние семплы: {actual} вместо {expected}"))

    def _report(self, error: PnmError) -> None:
        if self._strict:
            raise error
        logger.warning("%s", error)
