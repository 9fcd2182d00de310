"""Боковая панель: файл, информация, курсор и операции над изображением.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from pnmkit.models.image_model import ImageData


def _format_size(size_bytes: Optional[int]) -> str:
    if size_bytes is None:
        return "—"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    return f"{size_bytes / 1024:.1f} KB"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, курсор, операции."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_file: Optional[Callable[[bool], None]] = None  # arg: save as
        self.on_operation: Optional[Callable[[str], None]] = None
        self.on_undo: Optional[Callable[[], None]] = None
        self.on_revert: Optional[Callable[[], None]] = None

        bold = ctk.CTkFont(size=16, weight="bold")

        # File
        self._title = ctk.CTkLabel(self, text="Файл", font=bold)
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")
        self._open_btn = ctk.CTkButton(self, text="Открыть PBM/PGM…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")
        file_row = ctk.CTkFrame(self, fg_color="transparent")
        file_row.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")
        file_row.grid_columnconfigure((0, 1), weight=1)
        self._save_btn = ctk.CTkButton(file_row, text="Сохранить", command=lambda: self._emit_save(False))
        self._save_as_btn = ctk.CTkButton(file_row, text="Сохранить как…", command=lambda: self._emit_save(True))
        self._save_btn.grid(row=0, column=0, padx=(0, 4), sticky="ew")
        self._save_as_btn.grid(row=0, column=1, padx=(4, 0), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=bold)
        self._info_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._format_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_format = ctk.CTkLabel(self, textvariable=self._format_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")

        self._info_path.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_format.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=6, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=7, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Cursor section
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=bold)
        self._cursor_title.grid(row=8, column=0, padx=8, pady=(8, 4), sticky="w")
        self._cursor_val = ctk.StringVar(value="—")
        self._cursor = ctk.CTkLabel(self, textvariable=self._cursor_val, anchor="w", justify="left")
        self._cursor.grid(row=9, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Operations
        self._ops_title = ctk.CTkLabel(self, text="Операции", font=bold)
        self._ops_title.grid(row=10, column=0, padx=8, pady=(8, 4), sticky="w")

        ops = ctk.CTkFrame(self, fg_color="transparent")
        ops.grid(row=11, column=0, padx=8, pady=(0, 8), sticky="ew")
        ops.grid_columnconfigure((0, 1), weight=1)
        buttons = (
            ("Инвертировать", "invert"),
            ("Отразить ↔", "flip"),
            ("Отразить ↕", "flop"),
            ("Повернуть 90°", "rotate90cw"),
        )
        for index, (label, op) in enumerate(buttons):
            btn = ctk.CTkButton(ops, text=label, command=lambda op=op: self._emit_operation(op))
            btn.grid(row=index // 2, column=index % 2, padx=2, pady=2, sticky="ew")

        # Variant
        self._variant_label = ctk.CTkLabel(self, text="Кодировка:")
        self._variant_label.grid(row=12, column=0, padx=8, pady=(4, 2), sticky="w")
        self._variant_buttons = ctk.CTkSegmentedButton(
            self, values=["ascii", "binary"], command=self._emit_operation
        )
        self._variant_buttons.grid(row=13, column=0, padx=8, pady=(0, 8), sticky="ew")

        # Grayscale only: max value + threshold
        self._gray_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._gray_frame.grid(row=14, column=0, padx=8, pady=(0, 8), sticky="ew")
        self._gray_frame.grid_columnconfigure(0, weight=1)

        self._max_value_val = ctk.StringVar(value="255")
        self._max_label = ctk.CTkLabel(self._gray_frame, text="Макс. яркость (1–255):")
        self._max_entry = ctk.CTkEntry(self._gray_frame, textvariable=self._max_value_val, width=80)
        self._max_btn = ctk.CTkButton(self._gray_frame, text="Применить", width=90,
                                      command=lambda: self._emit_operation("max_value"))
        self._max_label.grid(row=0, column=0, columnspan=2, pady=(0, 2), sticky="w")
        self._max_entry.grid(row=1, column=0, pady=(0, 6), sticky="w")
        self._max_btn.grid(row=1, column=1, pady=(0, 6), sticky="e")

        self._threshold_val = ctk.StringVar(value="50%")
        self._threshold_label = ctk.CTkLabel(self._gray_frame, text="Порог (доля max):")
        self._threshold_slider = ctk.CTkSlider(self._gray_frame, from_=0, to=100, number_of_steps=100,
                                               command=self._on_threshold_change)
        self._threshold_slider.set(50)
        self._threshold_value = ctk.CTkLabel(self._gray_frame, textvariable=self._threshold_val, width=48, anchor="w")
        self._otsu_var = ctk.BooleanVar(value=False)
        self._otsu_check = ctk.CTkCheckBox(self._gray_frame, text="Порог Отсу", variable=self._otsu_var)
        self._to_bitmap_btn = ctk.CTkButton(self._gray_frame, text="В bitmap",
                                            command=lambda: self._emit_operation("to_bitmap"))
        self._threshold_label.grid(row=2, column=0, columnspan=2, pady=(0, 2), sticky="w")
        self._threshold_slider.grid(row=3, column=0, pady=(0, 2), sticky="ew")
        self._threshold_value.grid(row=3, column=1, pady=(0, 2), sticky="w")
        self._otsu_check.grid(row=4, column=0, columnspan=2, pady=(2, 4), sticky="w")
        self._to_bitmap_btn.grid(row=5, column=0, columnspan=2, pady=(0, 4), sticky="ew")

        # History
        history = ctk.CTkFrame(self, fg_color="transparent")
        history.grid(row=15, column=0, padx=8, pady=(0, 8), sticky="ew")
        history.grid_columnconfigure((0, 1), weight=1)
        self._undo_btn = ctk.CTkButton(history, text="Отменить", command=self._emit_undo)
        self._revert_btn = ctk.CTkButton(history, text="Показать оригинал", command=self._emit_revert)
        self._undo_btn.grid(row=0, column=0, padx=(0, 4), sticky="ew")
        self._revert_btn.grid(row=0, column=1, padx=(4, 0), sticky="ew")

        # filler
        self.grid_rowconfigure(99, weight=1)

    # ---- Public API ----
    def set_image_info(self, data: Optional[ImageData], image=None) -> None:
        """Обновляет блок информации; `image` задаёт текущее (возможно изменённое) изображение."""
        if data is None:
            for var in (self._path_val, self._format_val, self._dims_val, self._size_val):
                var.set("—")
            return
        image = image if image is not None else data.image
        max_value = getattr(image, "max_value", None)
        self._path_val.set(f"Путь: {data.path}")
        fmt = f"Формат: {image.magic_number}"
        if max_value is not None:
            fmt += f", max {max_value}"
        self._format_val.set(fmt)
        self._dims_val.set(f"Размер: {image.width}×{image.height}")
        self._size_val.set(f"Файл: {_format_size(data.size_bytes)}")
        self._variant_buttons.set(image.variant.value)
        if max_value is not None:
            self._max_value_val.set(str(max_value))
            self._gray_frame.grid()
        else:
            self._gray_frame.grid_remove()

    def update_cursor_info(self, x: Optional[int], y: Optional[int], value: Optional[object]) -> None:
        if x is None or y is None:
            self._cursor_val.set("—")
            return
        self._cursor_val.set(f"X: {x}, Y: {y}, значение: {value}")

    def set_undo_enabled(self, enabled: bool) -> None:
        self._undo_btn.configure(state="normal" if enabled else "disabled")

    def get_max_value(self) -> int:
        return int(self._max_value_val.get().strip())

    def get_threshold_ratio(self) -> float:
        return float(self._threshold_slider.get()) / 100.0

    def get_use_otsu(self) -> bool:
        return bool(self._otsu_var.get())

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_save(self, save_as: bool) -> None:
        if self.on_save_file:
            self.on_save_file(save_as)

    def _emit_operation(self, op: str) -> None:
        if self.on_operation:
            self.on_operation(op)

    def _emit_undo(self) -> None:
        if self.on_undo:
            self.on_undo()

    def _emit_revert(self) -> None:
        if self.on_revert:
            self.on_revert()

    def _on_threshold_change(self, value: float) -> None:
        self._threshold_val.set(f"{int(round(value))}%")
