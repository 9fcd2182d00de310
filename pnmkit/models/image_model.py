"""Модель загруженного файла: изображение и метаданные.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая запись о загруженном изображении.

    Fields:
        path: Путь к исходному файлу.
        image: Декодированное изображение (сама модель изменяемая).
        magic: Magic number на момент загрузки, например "P5".
        width: Ширина, px.
        height: Высота, px.
        max_value: Максимальная яркость (None для bitmap).
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    image: Union[BitmapImage, GrayscaleImage]
    magic: str
    width: int
    height: int
    max_value: Optional[int]
    size_bytes: Optional[int]

    def describe(self) -> str:
        kind = "bitmap" if self.max_value is None else f"grayscale, max {self.max_value}"
        return f"{self.path.name}: {self.magic} {self.width}x{self.height} ({kind})"
