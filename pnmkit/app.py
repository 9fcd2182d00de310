import customtkinter as ctk

from pnmkit.controllers.app_controller import AppController
from pnmkit.ui.image_viewer import ImageViewer
from pnmkit.ui.sidebar import Sidebar
from pnmkit.ui.bottom_bar import BottomBar


class PnmViewerApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("pnmkit")
        self.minsize(900, 600)

        # root layout: left viewer, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self)
        self._controller.bind_events()

    def open_path(self, file_path: str) -> None:
        # defer until the canvas has its real size so "fit" is computed correctly
        self.after(50, lambda: self._controller.open_path(file_path))
