"""Общая модель растрового изображения netpbm.

Принципы:
- SRP: только данные и преобразования пикселей, без чтения/записи файлов.
- LSP: `BitmapImage` и `GrayscaleImage` предоставляют одинаковый набор операций
  с одинаковыми именами, вызывающий код работает с ними через `RasterImage`.
- Сетка пикселей хранится как numpy-массив формы (height, width), строка за строкой.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Dict, List, Tuple, Union

import numpy as np

from pnmkit.exceptions import IncompatibleVariantError, InvalidDimensionsError


class Variant(str, Enum):
    """Кодировка пикселей на диске: текстовая или двоичная."""
    ASCII = "ascii"
    BINARY = "binary"


class RasterImage:
    """Базовый класс изображений с сеткой пикселей фиксированной формы.

    Подклассы задают `KIND`, `MAGIC` (variant -> magic number) и `DTYPE`,
    а также реализуют `invert` и приведение значения пикселя `_coerce`.

    Доступ к пикселям вне `[0, width) x [0, height)` не считается ошибкой:
    чтение возвращает нулевое значение типа, запись игнорируется. Ошибки
    заголовка и содержимого файла, напротив, всегда выбрасываются.
    """
    KIND: ClassVar[str] = ""
    MAGIC: ClassVar[Dict[Variant, str]] = {}
    DTYPE: ClassVar[Any] = None

    def __init__(self, width: int, height: int, variant: Variant = Variant.ASCII, pixels: Any = None) -> None:
        _check_dimensions(width, height)
        self._width = int(width)
        self._height = int(height)
        self._variant = Variant(variant)
        if pixels is None:
            self._pixels = np.zeros((self._height, self._width), dtype=self.DTYPE)
        else:
            self._pixels = self._validate_grid(pixels)

    # ---- Properties ----
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)."""
        return self._width, self._height

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def magic_number(self) -> str:
        return self.MAGIC[self._variant]

    @property
    def pixels(self) -> np.ndarray:
        """Копия сетки пикселей формы (height, width)."""
        return self._pixels.copy()

    # ---- Pixel access ----
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def at(self, x: int, y: int):
        """Значение пикселя в столбце `x`, строке `y`; вне границ возвращается нулевое значение."""
        if not self.in_bounds(x, y):
            return self._zero()
        return self._scalar(self._pixels[y, x])

    def set(self, x: int, y: int, value: Any) -> None:
        """Записывает пиксель; вне границ запись молча игнорируется."""
        if not self.in_bounds(x, y):
            return
        self._pixels[y, x] = self._coerce(value)

    # ---- Transforms ----
    def invert(self) -> None:
        raise NotImplementedError

    def flip(self) -> None:
        """Горизонтальное отражение: столбцы j и width-1-j меняются местами."""
        self._pixels[:] = self._pixels[:, ::-1].copy()

    def flop(self) -> None:
        """Вертикальное отражение: строки i и height-1-i меняются местами."""
        self._pixels[:] = self._pixels[::-1, :].copy()

    def rotate90cw(self) -> None:
        """Поворот на 90° по часовой стрелке.

        Пиксель (i, j) исходной сетки переходит в (j, height-1-i); ширина и высота меняются местами.
        """
        rotated = np.empty((self._width, self._height), dtype=self.DTYPE)
        rotated[:] = np.rot90(self._pixels, k=-1)
        self._pixels = rotated
        self._width, self._height = self._height, self._width

    def set_variant(self, target: Union[Variant, str]) -> None:
        """Переключает кодировку (ASCII <-> BINARY) в пределах той же глубины цвета.

        Args:
            target: `Variant`, имя варианта ("ascii"/"binary") или magic number ("P1", "P5", ...).

        Raises:
            IncompatibleVariantError: magic number другой глубины цвета или неизвестный;
                изображение при этом не меняется.
        """
        self._variant = self._resolve_variant(target)

    # ---- Value semantics ----
    def copy(self):
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._pixels = self._pixels.copy()
        return clone

    def to_list(self) -> List[list]:
        """Сетка пикселей как вложенные списки Python."""
        return self._pixels.tolist()

    def rows(self):
        for row in self._pixels:
            yield row.copy()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._variant == other._variant
            and self._extra_state() == other._extra_state()
            and np.array_equal(self._pixels, other._pixels)
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.magic_number}, {self._width}x{self._height})"

    # ---- Hooks ----
    def _extra_state(self) -> tuple:
        return ()

    def _zero(self):
        raise NotImplementedError

    def _scalar(self, value):
        raise NotImplementedError

    def _coerce(self, value: Any):
        raise NotImplementedError

    def _validate_grid(self, pixels: Any) -> np.ndarray:
        raise NotImplementedError

    def _as_array(self, pixels: Any) -> np.ndarray:
        try:
            arr = np.asarray(pixels)
        except ValueError as exc:
            raise InvalidDimensionsError(f"pixel grid is not rectangular: {exc}") from exc
        if arr.shape != (self._height, self._width):
            raise InvalidDimensionsError(
                f"pixel grid has shape {arr.shape}, expected ({self._height}, {self._width})"
            )
        return arr

    def _resolve_variant(self, target: Union[Variant, str]) -> Variant:
        if isinstance(target, Variant):
            return target
        if isinstance(target, str):
            for variant, magic in self.MAGIC.items():
                if target.upper() == magic:
                    return variant
            try:
                return Variant(target.lower())
            except ValueError:
                pass
        raise IncompatibleVariantError(target, self.KIND)


def _check_dimensions(width: Any, height: Any) -> None:
    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidDimensionsError(f"dimensions must be positive integers, got {width!r} x {height!r}")
