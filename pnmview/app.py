import customtkinter as ctk

from pnmview.config import ViewerConfig
from pnmview.controllers.app_controller import AppController
from pnmview.models.image_model import PnmImage
from pnmview.ui.frame_view import FrameView


class PnmViewerApp(ctk.CTk):
    def __init__(self, image: PnmImage, config: ViewerConfig) -> None:
        super().__init__()
        ctk.set_appearance_mode(config.appearance_mode)
        ctk.set_default_color_theme(config.color_theme)

        width, height = image.width, image.height
        self.title(f"{config.title} - {image.path.name} ({width}x{height}, {image.header.variant.tag})")
        # window inner size starts at the image size and never goes below it
        self.geometry(f"{width}x{height}")
        self.minsize(width, height)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._view = FrameView(self, frame_width=width, frame_height=height, corner_radius=0)
        self._view.grid(row=0, column=0, sticky="nsew")

        self._controller = AppController(image=image, surface=self._view, window=self)
        self._controller.bind_events()
        self.after_idle(self._controller.handle_redraw)
