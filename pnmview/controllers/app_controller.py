"""Контроллер приложения: связывает окно, поверхность показа и кадр.

SOLID:
- SRP: класс управляет событиями окна и состоянием показа, без декодирования.
- DIP: поверхность и окно нужны только как роли (`Surface`, `destroy`/`bind`).
Clean Code:
- Изображение статично: кадр пишется один раз, дальше только показывается.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pnmview.models.image_model import PnmImage
from pnmview.models.presentation_state import PresentationState
from pnmview.services.frame_service import FrameService
from pnmview.ui.surface import Surface

if TYPE_CHECKING:
    import customtkinter as ctk

logger = logging.getLogger(__name__)

QUIT_KEYS = ("Escape",)


@dataclass
class AppController:
    """Обрабатывает перерисовку, изменение размера и закрытие окна.

    Ответственности:
    - Первый запрос перерисовки пишет кадр и переводит состояние в PRESENTED.
    - Последующие запросы только показывают уже записанный кадр.
    - Изменение размера перенастраивает поверхность и показывает тот же кадр.
    - Escape и закрытие окна завершают цикл событий.
    """
    image: PnmImage
    surface: Surface
    window: ctk.CTk

    _frame_service: FrameService = FrameService()
    _state: PresentationState = PresentationState.NOT_PRESENTED
    _closed: bool = False

    @property
    def state(self) -> PresentationState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def bind_events(self) -> None:
        """Регистрирует обработчики событий окна и поверхности."""
        self.surface.on_redraw = self.handle_redraw
        self.surface.on_resize = self.handle_resize
        self.window.bind("<KeyPress>", lambda event: self.handle_key(event.keysym))
        self.window.protocol("WM_DELETE_WINDOW", self.handle_quit)

    # ---- Handlers ----
    def handle_redraw(self) -> None:
        if self._closed:
            return
        if self._state is PresentationState.NOT_PRESENTED:
            written = self._frame_service.write_frame(self.image, self.surface.frame_buffer)
            self._state = PresentationState.PRESENTED
            logger.debug("Frame written: %d pixels", written)
        self._present()

    def handle_resize(self, width: int, height: int) -> None:
        if self._closed:
            return
        self.surface.resize(width, height)
        self._present()

    def handle_key(self, keysym: str) -> None:
        if keysym in QUIT_KEYS:
            self.handle_quit()

    def handle_quit(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.window.destroy()

    # ---- Helpers ----
    def _present(self) -> None:
        try:
            self.surface.render()
        except Exception:
            logger.exception("Surface render failed")
            self.handle_quit()
