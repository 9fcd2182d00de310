"""Иерархия исключений библиотеки.

Принципы:
- Ошибки заголовка и содержимого файла громкие: декодирование прерывается исключением.
- Выход координат за границы изображения ошибкой не является (см. `RasterImage.at`).
- Ошибки ввода-вывода оборачиваются в `ImageIOError` с сохранением причины (`from exc`).
"""
from __future__ import annotations

from typing import Optional


class PnmError(Exception):
    """Базовое исключение для всех ошибок pnmkit."""


class ImageIOError(PnmError):
    """Не удалось открыть, прочитать или записать файл изображения."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class FormatError(PnmError, ValueError):
    """Содержимое не соответствует формату netpbm."""


class UnsupportedMagicError(FormatError):
    def __init__(self, magic: str, expected: tuple = ()) -> None:
        if expected:
            message = f"unsupported magic number {magic!r}, expected one of {', '.join(expected)}"
        else:
            message = f"unsupported magic number {magic!r}"
        super().__init__(message)
        self.magic = magic
        self.expected = expected


class UnsupportedVariantError(FormatError):
    def __init__(self, variant: object) -> None:
        super().__init__(f"no codec for variant {variant!r}")
        self.variant = variant


class InvalidDimensionsError(FormatError):
    pass


class InvalidMaxValueError(FormatError):
    pass


class InvalidPixelTokenError(FormatError):
    def __init__(self, token: str, row: int, column: int) -> None:
        super().__init__(f"invalid pixel token {token!r} at row {row}, column {column}")
        self.token = token
        self.row = row
        self.column = column


class UnexpectedEndOfDataError(FormatError):
    def __init__(self, row: int, detail: str = "") -> None:
        message = f"unexpected end of pixel data at row {row}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.row = row


class PixelExceedsMaxValueError(FormatError):
    def __init__(self, value: int, max_value: int, row: Optional[int] = None, column: Optional[int] = None) -> None:
        if row is None:
            message = f"pixel value {value} exceeds max value {max_value}"
        else:
            message = f"pixel value {value} at row {row}, column {column} is outside [0, {max_value}]"
        super().__init__(message)
        self.value = value
        self.max_value = max_value
        self.row = row
        self.column = column


class ConfigError(PnmError):
    """Запрос на изменение параметров изображения отклонён; изображение не изменено."""


class IncompatibleVariantError(ConfigError):
    def __init__(self, requested: object, current: str) -> None:
        super().__init__(f"cannot switch {current} image to {requested!r}")
        self.requested = requested
        self.current = current
