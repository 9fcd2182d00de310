"""Сеанс редактирования: текущее изображение, история и применение операций.

Принципы:
- SRP: сеанс не знает о виджетах; контроллер и CLI вызывают его по имени операции.
- Операция, завершившаяся исключением, не оставляет следа ни в изображении, ни в истории.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pnmkit.exceptions import ConfigError
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.models.image_model import ImageData
from pnmkit.models.raster import RasterImage, Variant
from pnmkit.services.image_service import ImageService
from pnmkit.services.process_service import ProcessService

logger = logging.getLogger(__name__)

AnyImage = Union[BitmapImage, GrayscaleImage]

OPERATIONS = ("invert", "flip", "flop", "rotate90cw", "to_bitmap", "ascii", "binary", "max_value")

HISTORY_LIMIT = 32


class EditorService:
    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        process_service: Optional[ProcessService] = None,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._process_service = process_service or ProcessService()
        self._current: Optional[AnyImage] = None
        self._original: Optional[AnyImage] = None
        self._history: List[AnyImage] = []
        self.path: Optional[Path] = None

        self._handlers: Dict[str, Callable[..., Optional[AnyImage]]] = {
            "invert": lambda img: img.invert(),
            "flip": lambda img: img.flip(),
            "flop": lambda img: img.flop(),
            "rotate90cw": lambda img: img.rotate90cw(),
            "ascii": lambda img: img.set_variant(Variant.ASCII),
            "binary": lambda img: img.set_variant(Variant.BINARY),
            "max_value": self._set_max_value,
            "to_bitmap": self._to_bitmap,
        }

    # ---- State ----
    @property
    def image(self) -> Optional[AnyImage]:
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def open(self, file_path: Union[str, Path]) -> ImageData:
        data = self._image_service.load_data(file_path)
        self.set_image(data.image, data.path)
        return data

    def set_image(self, image: AnyImage, path: Optional[Path] = None) -> None:
        self._current = image
        self._original = image.copy()
        self._history.clear()
        self.path = path

    # ---- Operations ----
    def apply(self, operation: str, **params: Any) -> AnyImage:
        """Применяет операцию по имени к текущему изображению.

        Args:
            operation: Одно из `OPERATIONS`.
            **params: `value` для "max_value"; `threshold` или `method` для "to_bitmap".

        Returns:
            Текущее изображение после операции (для "to_bitmap" новое).

        Raises:
            ConfigError: нет изображения, операция неизвестна или неприменима.
        """
        if self._current is None:
            raise ConfigError("No image loaded")
        handler = self._handlers.get(operation)
        if handler is None:
            raise ConfigError(f"Unknown operation: {operation!r}")

        snapshot = self._current.copy()
        try:
            result = handler(self._current, **params)
        except Exception:
            self._current = snapshot
            raise
        if result is not None:
            self._current = result
        self._history.append(snapshot)
        del self._history[:-HISTORY_LIMIT]
        logger.debug("Applied %s -> %r", operation, self._current)
        return self._current

    def undo(self) -> bool:
        if not self._history:
            return False
        self._current = self._history.pop()
        return True

    def revert(self) -> None:
        """Возврат к изображению в том виде, в каком оно было загружено."""
        if self._original is None:
            return
        self._history.append(self._current)
        del self._history[:-HISTORY_LIMIT]
        self._current = self._original.copy()

    def save(self, file_path: Optional[Union[str, Path]] = None, comment: Optional[str] = None) -> Path:
        if self._current is None:
            raise ConfigError("No image loaded")
        target = Path(file_path) if file_path is not None else self.path
        if target is None:
            raise ConfigError("No destination path")
        saved = self._image_service.save_image(self._current, target, comment=comment)
        self.path = saved
        return saved

    # ---- Helpers ----
    def _set_max_value(self, image: RasterImage, value: int) -> None:
        if not isinstance(image, GrayscaleImage):
            raise ConfigError("Max value applies to grayscale images only")
        image.set_max_value(value)

    def _to_bitmap(self, image: RasterImage, threshold: Optional[int] = None, method: Union[str, int] = "half") -> BitmapImage:
        if not isinstance(image, GrayscaleImage):
            raise ConfigError("Image is already a bitmap")
        if threshold is not None:
            return image.to_bitmap(threshold)
        return self._process_service.binarize(image, method)
