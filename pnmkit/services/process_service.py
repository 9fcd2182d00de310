from __future__ import annotations

from typing import Union

import numpy as np
from PIL import Image

from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage, check_max_value
from pnmkit.models.raster import Variant


class ProcessService:
    # ---------- Pillow interop ----------
    def to_pil(self, image: Union[BitmapImage, GrayscaleImage]) -> Image.Image:
        """
        Представление изображения для отображения: Pillow, режим L (0..255).
        Чёрный пиксель bitmap (True) -> 0; grayscale масштабируется от max_value к 255.
        """
        if isinstance(image, BitmapImage):
            out = np.where(image.pixels, 0, 255).astype(np.uint8)
        else:
            wide = image.pixels.astype(np.int32)
            out = ((wide * 255 + image.max_value // 2) // image.max_value).astype(np.uint8)
        return Image.fromarray(out)

    def from_pil(self, image: Image.Image, max_value: int = 255, variant: Variant = Variant.BINARY) -> GrayscaleImage:
        """
        Импорт произвольного изображения Pillow (PNG, JPEG, ...) как GrayscaleImage.
        Яркости 0..255 пересчитываются к диапазону 0..max_value.
        """
        max_value = check_max_value(max_value)
        gray = image if image.mode == "L" else image.convert("L")
        arr = np.asarray(gray, dtype=np.int32)
        if max_value != 255:
            arr = (arr * max_value + 127) // 255
        height, width = arr.shape
        return GrayscaleImage(width, height, max_value=max_value, variant=variant, pixels=arr.astype(np.uint8))

    # ---------- Пороговые методы ----------
    def otsu_threshold(self, image: GrayscaleImage) -> int:
        """
        Порог Отсу в единицах изображения (0..max_value+1).
        Возвращает T такой, что пиксели >= T относятся к светлому классу.
        """
        hist = image.histogram().astype(np.float64)
        total = hist.sum()
        if total == 0:
            return image.max_value // 2

        levels = np.arange(hist.size)
        prob = hist / total
        omega = np.cumsum(prob)  # кумулятивные вероятности
        mu = np.cumsum(prob * levels)  # кумулятивные средние
        mu_t = mu[-1]

        # Межклассовая дисперсия
        numerator = (mu_t * omega - mu) ** 2
        denominator = omega * (1.0 - omega)
        with np.errstate(divide="ignore", invalid="ignore"):
            sigma_b2 = np.where(denominator > 0, numerator / denominator, 0.0)
        # класс "тёмных" включает t, поэтому граница для >= на единицу больше
        return int(np.argmax(sigma_b2)) + 1

    def binarize(self, image: GrayscaleImage, method: Union[str, int] = "half") -> BitmapImage:
        """
        Перевод в bitmap: "half": порог max_value // 2; "otsu": порог Отсу;
        целое число: явный порог.
        """
        if method == "half":
            return image.to_bitmap()
        if method == "otsu":
            return image.to_bitmap(self.otsu_threshold(image))
        if isinstance(method, (int, np.integer)) and not isinstance(method, bool):
            return image.to_bitmap(int(method))
        raise ValueError(f"Unknown binarization method: {method!r}")
