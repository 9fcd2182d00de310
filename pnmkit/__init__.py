"""pnmkit: чтение, преобразование и запись изображений PBM (P1/P4) и PGM (P2/P5)."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from pnmkit.config import DEFAULT_SETTINGS, CodecSettings
from pnmkit.exceptions import (
    ConfigError,
    FormatError,
    ImageIOError,
    IncompatibleVariantError,
    InvalidDimensionsError,
    InvalidMaxValueError,
    InvalidPixelTokenError,
    PixelExceedsMaxValueError,
    PnmError,
    UnexpectedEndOfDataError,
    UnsupportedMagicError,
    UnsupportedVariantError,
)
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.models.raster import RasterImage, Variant
from pnmkit.services.image_service import ImageService
from pnmkit.services.pnm_codec import decode, decode_bitmap, decode_grayscale, encode

__version__ = "0.3.0"


def load(path: Union[str, Path], settings: CodecSettings = DEFAULT_SETTINGS) -> Union[BitmapImage, GrayscaleImage]:
    return ImageService(settings).load_image(path)


def save(image: RasterImage, path: Union[str, Path], comment: Optional[str] = None) -> Path:
    return ImageService().save_image(image, path, comment=comment)


__all__ = [
    "BitmapImage",
    "CodecSettings",
    "ConfigError",
    "DEFAULT_SETTINGS",
    "FormatError",
    "GrayscaleImage",
    "ImageIOError",
    "ImageService",
    "IncompatibleVariantError",
    "InvalidDimensionsError",
    "InvalidMaxValueError",
    "InvalidPixelTokenError",
    "PixelExceedsMaxValueError",
    "PnmError",
    "RasterImage",
    "UnexpectedEndOfDataError",
    "UnsupportedMagicError",
    "UnsupportedVariantError",
    "Variant",
    "decode",
    "decode_bitmap",
    "decode_grayscale",
    "encode",
    "load",
    "save",
]
