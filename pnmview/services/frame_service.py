from __future__ import annotations

from typing import Union

import numpy as np

from pnmview.models.image_model import FormatVariant, PnmImage

Buffer = Union[bytearray, memoryview]


class FrameService:
    def write_frame(self, image: PnmImage, frame: Buffer) -> int:
        """
        Записывает семплы в RGBA-буфер кадра (R, G, B, 255) в порядке строк.

        Каждый канал приводится к байту как `value & 0xFF`. Пиксели без
        семпла не трогаются; лишние семплы игнорируются.
        Возвращает число записанных пикселей.
        """
        if image.header.variant is FormatVariant.INVALID:
            return 0
        out = np.frombuffer(frame, dtype=np.uint8).reshape(-1, 4)
        count = min(len(out), len(image.samples))
        if count == 0:
            return 0
        rgb = np.asarray(image.samples[:count], dtype=np.int64).reshape(-1, 3) & 0xFF
        out[:count, :3] = rgb.astype(np.uint8)
        out[:count, 3] = 255
        return count

    def new_frame(self, width: int, height: int) -> bytearray:
        return bytearray(max(0, width) * max(0, height) * 4)
