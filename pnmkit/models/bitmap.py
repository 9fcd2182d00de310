"""Модель двухцветного изображения PBM (P1/P4)."""
from __future__ import annotations

from typing import Any

import numpy as np

from pnmkit.models.raster import RasterImage, Variant


class BitmapImage(RasterImage):
    """Изображение 1 бит на пиксель; True означает чёрный пиксель."""
    KIND = "bitmap"
    MAGIC = {Variant.ASCII: "P1", Variant.BINARY: "P4"}
    DTYPE = np.bool_

    def invert(self) -> None:
        """Инвертирует каждый пиксель; повторный вызов восстанавливает исходную сетку."""
        np.logical_not(self._pixels, out=self._pixels)

    def _zero(self) -> bool:
        return False

    def _scalar(self, value) -> bool:
        return bool(value)

    def _coerce(self, value: Any) -> bool:
        return bool(value)

    def _validate_grid(self, pixels: Any) -> np.ndarray:
        arr = self._as_array(pixels)
        return arr.astype(np.bool_, copy=True)
