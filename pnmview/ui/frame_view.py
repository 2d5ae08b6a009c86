"""Виджет показа кадра: RGBA-буфер размера изображения, растянутый на канву.

Принципы:
- SRP: отвечает только за представление буфера, ничего не знает о форматах.
- Чистый код: события канвы наружу отдаются через колбэки `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from pnmview.ui.surface import Surface


class FrameView(ctk.CTkFrame, Surface):
    """Канва с одним изображением, собранным из буфера кадра."""
    def __init__(self, master: ctk.CTk | tk.Misc, frame_width: int, frame_height: int, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._view_canvas = tk.Canvas(
            self, width=frame_width, height=frame_height, highlightthickness=0, bg=self._get_canvas_bg()
        )
        self._view_canvas.grid(row=0, column=0, sticky="nsew")

        self._frame_size: Tuple[int, int] = (frame_width, frame_height)
        self._surface_size: Tuple[int, int] = (frame_width, frame_height)
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self.frame_buffer = bytearray(frame_width * frame_height * 4)

        self.on_redraw: Optional[Callable[[], None]] = None
        self.on_resize: Optional[Callable[[int, int], None]] = None

        self._view_canvas.bind("<Configure>", self._on_canvas_resize)
        self._view_canvas.bind("<Expose>", self._on_expose)

    # ---- Public API ----
    @property
    def frame_size(self) -> Tuple[int, int]:
        return self._frame_size

    def render(self) -> None:
        """Перерисовывает канву из буфера, растягивая кадр на текущий размер поверхности."""
        self._view_canvas.delete("all")
        frame_w, frame_h = self._frame_size
        if frame_w == 0 or frame_h == 0:
            return
        image = Image.frombuffer("RGBA", (frame_w, frame_h), bytes(self.frame_buffer), "raw", "RGBA", 0, 1)
        if self._surface_size != self._frame_size:
            image = image.resize(self._surface_size, Image.Resampling.NEAREST)
        self._tk_image = ImageTk.PhotoImage(image)
        self._view_canvas.create_image(0, 0, image=self._tk_image, anchor="nw")

    def resize(self, width: int, height: int) -> None:
        self._surface_size = (max(1, width), max(1, height))

    # ---- Internals ----
    def _on_canvas_resize(self, event: tk.Event) -> None:
        if self.on_resize:
            self.on_resize(event.width, event.height)

    def _on_expose(self, _event: tk.Event) -> None:
        if self.on_redraw:
            self.on_redraw()

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
