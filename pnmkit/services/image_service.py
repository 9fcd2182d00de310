"""Загрузка и сохранение изображений netpbm на диске.

Принципы:
- SRP: класс отвечает только за файловый ввод-вывод; формат разбирает `pnm_codec`.
- Файл открывается, читается или пишется целиком и закрывается до возврата,
  в том числе при ошибке.
- Ошибки ОС оборачиваются в `ImageIOError` с исходной причиной.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pnmkit.config import DEFAULT_SETTINGS, CodecSettings
from pnmkit.exceptions import ImageIOError
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.models.image_model import ImageData
from pnmkit.models.raster import RasterImage
from pnmkit.services import pnm_codec

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ImageService:
    def __init__(self, settings: CodecSettings = DEFAULT_SETTINGS) -> None:
        self.settings = settings

    def read_bytes(self, file_path: PathLike) -> bytes:
        path = Path(file_path)
        try:
            with path.open("rb") as fh:
                return fh.read()
        except OSError as exc:
            raise ImageIOError(f"Cannot read {path}: {exc.strerror or exc}", str(path)) from exc

    def load_image(self, file_path: PathLike) -> Union[BitmapImage, GrayscaleImage]:
        """Загружает PBM или PGM, определяя тип по magic number.

        Raises:
            ImageIOError: файл не существует или не читается.
            FormatError: содержимое не является корректным P1/P2/P4/P5.
        """
        image = pnm_codec.decode(self.read_bytes(file_path), self.settings)
        logger.info("Loaded %s from %s", image, file_path)
        return image

    def load_bitmap(self, file_path: PathLike) -> BitmapImage:
        image = pnm_codec.decode_bitmap(self.read_bytes(file_path), self.settings)
        logger.info("Loaded %s from %s", image, file_path)
        return image

    def load_grayscale(self, file_path: PathLike) -> GrayscaleImage:
        image = pnm_codec.decode_grayscale(self.read_bytes(file_path), self.settings)
        logger.info("Loaded %s from %s", image, file_path)
        return image

    def load_data(self, file_path: PathLike) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` с моделью изображения, magic number, размерами и размером файла.
        """
        path = Path(file_path)
        image = self.load_image(path)
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        return ImageData(
            path=path,
            image=image,
            magic=image.magic_number,
            width=image.width,
            height=image.height,
            max_value=getattr(image, "max_value", None),
            size_bytes=size_bytes,
        )

    def save_image(self, image: RasterImage, file_path: PathLike, comment: Optional[str] = None) -> Path:
        """Записывает изображение в его текущей кодировке.

        Args:
            image: Изображение для записи.
            file_path: Путь назначения (перезаписывается).
            comment: Комментарий в заголовке; по умолчанию `settings.comment`.

        Raises:
            ImageIOError: запись не удалась.
        """
        path = Path(file_path)
        payload = pnm_codec.encode(image, comment if comment is not None else self.settings.comment)
        try:
            with path.open("wb") as fh:
                fh.write(payload)
        except OSError as exc:
            raise ImageIOError(f"Cannot write {path}: {exc.strerror or exc}", str(path)) from exc
        logger.info("Saved %s to %s (%d bytes)", image, path, len(payload))
        return path
