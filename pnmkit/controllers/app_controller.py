"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от абстрактных ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; операции выполняет `EditorService`.
- Ошибки формата и ввода-вывода показываются в строке состояния, окно не падает.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from tkinter import TclError, filedialog
from typing import Optional

import customtkinter as ctk

from pnmkit.exceptions import PnmError
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.models.image_model import ImageData
from pnmkit.services.editor_service import EditorService
from pnmkit.services.process_service import ProcessService
from pnmkit.ui.bottom_bar import BottomBar
from pnmkit.ui.image_viewer import ImageViewer
from pnmkit.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

FILE_TYPES = (
    ("Netpbm", "*.pbm *.pgm *.pnm"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка и сохранение через `EditorService`.
    - Применение выбранной пользователем операции и обновление просмотра.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _editor: EditorService = field(default_factory=EditorService)
    _process_service: ProcessService = field(default_factory=ProcessService)
    _current_data: Optional[ImageData] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_save_file = self._handle_save_file
        self.sidebar.on_operation = self._handle_operation
        self.sidebar.on_undo = self._handle_undo
        self.sidebar.on_revert = self._handle_revert
        self.viewer.on_cursor_move = self._handle_cursor_move
        self.viewer.on_zoom_change = self._handle_viewer_zoom_changed

        self.bottom.on_zoom_change = self._handle_zoom_change
        self.bottom.on_zoom_preset = self._handle_zoom_change
        self.bottom.on_zoom_fit = self._handle_zoom_fit
        self.sidebar.set_undo_enabled(False)

    def open_path(self, file_path: str) -> None:
        try:
            data = self._editor.open(file_path)
        except PnmError as exc:
            self._report(exc)
            return
        self._current_data = data
        self.viewer.set_reference_image(self._process_service.to_pil(data.image))
        self.viewer.set_image(self._process_service.to_pil(self._editor.image))
        self._refresh_info()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())
        self.bottom.set_status(data.describe())
        self.window.title(f"pnmkit: {data.path.name}")

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(title="Выберите изображение", filetypes=FILE_TYPES)
        except TclError:
            # Silent fail if dialog cannot open
            return
        if file_path:
            self.open_path(file_path)

    def _handle_save_file(self, save_as: bool) -> None:
        if self._editor.image is None:
            return
        target = None
        if save_as or self._editor.path is None:
            try:
                target = filedialog.asksaveasfilename(
                    title="Сохранить изображение",
                    defaultextension=".pgm" if isinstance(self._editor.image, GrayscaleImage) else ".pbm",
                    filetypes=FILE_TYPES,
                )
            except TclError:
                return
            if not target:
                return
        try:
            saved = self._editor.save(target)
        except PnmError as exc:
            self._report(exc)
            return
        self.bottom.set_status(f"Сохранено: {saved}")

    def _handle_operation(self, op: str) -> None:
        params = {}
        try:
            if op == "max_value":
                params["value"] = self.sidebar.get_max_value()
            elif op == "to_bitmap" and isinstance(self._editor.image, GrayscaleImage):
                if self.sidebar.get_use_otsu():
                    params["method"] = "otsu"
                else:
                    ratio = self.sidebar.get_threshold_ratio()
                    params["threshold"] = int(round(ratio * self._editor.image.max_value))
            self._editor.apply(op, **params)
        except (PnmError, ValueError) as exc:
            self._report(exc)
            return
        self._refresh_view()

    def _handle_undo(self) -> None:
        if self._editor.undo():
            self._refresh_view()

    def _handle_revert(self) -> None:
        self._editor.revert()
        self._refresh_view()

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int]) -> None:
        image = self._editor.image
        value = None if image is None or x is None else image.at(x, y)
        self.sidebar.update_cursor_info(x, y, value)

    def _handle_zoom_change(self, zoom_percent: int) -> None:
        self.viewer.set_zoom_percent(zoom_percent)

    def _handle_viewer_zoom_changed(self, zoom_percent: int) -> None:
        # sync bar when user zooms with mouse wheel
        self.bottom.set_zoom_percent(zoom_percent)

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    # ---- Helpers ----
    def _refresh_view(self) -> None:
        if self._editor.image is None:
            return
        self.viewer.set_image(self._process_service.to_pil(self._editor.image), keep_view=True)
        self._refresh_info()
        self.bottom.set_status(repr(self._editor.image))

    def _refresh_info(self) -> None:
        self.sidebar.set_image_info(self._current_data, self._editor.image)
        self.sidebar.set_undo_enabled(self._editor.can_undo)

    def _report(self, exc: Exception) -> None:
        logger.warning("%s", exc)
        self.bottom.set_status(f"Ошибка: {exc}")
