"""Модель изображения в оттенках серого PGM (P2/P5).

Принципы:
- Инвариант: ни один пиксель не превышает `max_value`. Конструктор отклоняет
  нарушающую сетку, `set` ограничивает значение, `set_max_value` пересчитывает пиксели.
- Преобразование в `BitmapImage` однонаправленное: bitmap ничего не знает о grayscale.
"""
from __future__ import annotations

from typing import Any, Optional

import numpy as np

from pnmkit.exceptions import InvalidMaxValueError, PixelExceedsMaxValueError
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.raster import RasterImage, Variant

MAX_VALUE_LIMIT = 255


def check_max_value(value: Any) -> int:
    """Проверяет, что максимальное значение является целым в диапазоне [1, 255]."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidMaxValueError(f"max value must be an integer, got {value!r}")
    if not 1 <= value <= MAX_VALUE_LIMIT:
        raise InvalidMaxValueError(f"max value must be in [1, {MAX_VALUE_LIMIT}], got {value}")
    return int(value)


class GrayscaleImage(RasterImage):
    """Изображение 8 бит на пиксель с верхней границей яркости `max_value`."""
    KIND = "grayscale"
    MAGIC = {Variant.ASCII: "P2", Variant.BINARY: "P5"}
    DTYPE = np.uint8

    def __init__(
        self,
        width: int,
        height: int,
        max_value: int = MAX_VALUE_LIMIT,
        variant: Variant = Variant.ASCII,
        pixels: Any = None,
    ) -> None:
        self._max_value = check_max_value(max_value)
        super().__init__(width, height, variant=variant, pixels=pixels)

    @property
    def max_value(self) -> int:
        return self._max_value

    def invert(self) -> None:
        """Заменяет каждый пиксель v на max_value - v."""
        np.subtract(self._max_value, self._pixels, out=self._pixels, casting="unsafe")

    def set_max_value(self, new_max: int) -> None:
        """Меняет верхнюю границу яркости с пропорциональным пересчётом пикселей.

        Каждый пиксель пересчитывается как round(v * new_max / old_max) с округлением
        половины вверх, поэтому инвариант `v <= max_value` сохраняется при любом новом
        значении. Пересчёт выполняется и при повышении границы, чтобы изображение
        выглядело так же.

        Raises:
            InvalidMaxValueError: `new_max` вне диапазона [1, 255].
        """
        new_max = check_max_value(new_max)
        old_max = self._max_value
        if new_max == old_max:
            return
        wide = self._pixels.astype(np.int32)
        rescaled = (wide * (2 * new_max) + old_max) // (2 * old_max)
        self._pixels = rescaled.astype(np.uint8)
        self._max_value = new_max

    def to_bitmap(self, threshold: Optional[int] = None) -> BitmapImage:
        """Пороговое преобразование в двухцветное изображение.

        Пиксель результата чёрный (True), если исходное значение >= порога.
        По умолчанию порог равен `max_value // 2`. Кодировка сохраняется: P2 -> P1, P5 -> P4.

        При `max_value == 1` порог по умолчанию равен 0, и любое изображение, даже
        полностью нулевое, становится полностью чёрным. Для такого случая передайте
        `threshold=1`.
        """
        if threshold is None:
            threshold = self._max_value // 2
        grid = np.empty((self._height, self._width), dtype=np.bool_)
        np.greater_equal(self._pixels, threshold, out=grid)
        return BitmapImage(self._width, self._height, variant=self._variant, pixels=grid)

    def histogram(self) -> np.ndarray:
        """Количество пикселей для каждого значения 0..max_value."""
        return np.bincount(self._pixels.ravel(), minlength=self._max_value + 1)

    def _extra_state(self) -> tuple:
        return (self._max_value,)

    def _zero(self) -> int:
        return 0

    def _scalar(self, value) -> int:
        return int(value)

    def _coerce(self, value: Any) -> int:
        return max(0, min(self._max_value, int(value)))

    def _validate_grid(self, pixels: Any) -> np.ndarray:
        arr = self._as_array(pixels)
        if arr.dtype == np.bool_:
            arr = arr.astype(np.uint8)
        if arr.size:
            low = int(arr.min())
            high = int(arr.max())
            if low < 0 or high > self._max_value:
                offender = low if low < 0 else high
                row, column = np.argwhere(arr == offender)[0]
                raise PixelExceedsMaxValueError(offender, self._max_value, int(row), int(column))
        return arr.astype(np.uint8, copy=True)
