from typing import Callable, Optional, Tuple


class Surface:
    """Интерфейс поверхности показа: RGBA-буфер кадра фиксированного размера."""

    frame_buffer: bytearray
    on_redraw: Optional[Callable[[], None]] = None
    on_resize: Optional[Callable[[int, int], None]] = None

    @property
    def frame_size(self) -> Tuple[int, int]:
        """Размер буфера кадра (ширина, высота) в пикселях изображения."""
        raise NotImplementedError

    def render(self):
        """Показывает текущее содержимое буфера."""
        raise NotImplementedError

    def resize(self, width: int, height: int):
        """Перенастраивает поверхность под новый размер окна; буфер не меняется."""
        raise NotImplementedError
