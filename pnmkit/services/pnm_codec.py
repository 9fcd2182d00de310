"""Кодек netpbm: разбор заголовка, декодирование и кодирование пикселей P1/P2/P4/P5.

Принципы:
- SRP: только преобразование bytes <-> модель; файлы открывает `ImageService`.
- Чистые функции: декодер возвращает новое изображение или выбрасывает `FormatError`,
  частично заполненный результат наружу не попадает.
- Диагностика пишется в logging, консольного вывода нет.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Type, Union

import numpy as np

from pnmkit.config import DEFAULT_SETTINGS, CodecSettings
from pnmkit.exceptions import (
    InvalidDimensionsError,
    InvalidMaxValueError,
    InvalidPixelTokenError,
    PixelExceedsMaxValueError,
    UnexpectedEndOfDataError,
    UnsupportedMagicError,
    UnsupportedVariantError,
)
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import MAX_VALUE_LIMIT, GrayscaleImage
from pnmkit.models.raster import RasterImage, Variant

logger = logging.getLogger(__name__)

_WHITESPACE = b" \t\r\n\x0b\x0c"
_COMMENT = 0x23  # '#'

AnyImage = Union[BitmapImage, GrayscaleImage]

_IMAGE_TYPES: Dict[str, Tuple[Type[RasterImage], Variant]] = {
    "P1": (BitmapImage, Variant.ASCII),
    "P4": (BitmapImage, Variant.BINARY),
    "P2": (GrayscaleImage, Variant.ASCII),
    "P5": (GrayscaleImage, Variant.BINARY),
}


@dataclass(frozen=True)
class Header:
    """Разобранный заголовок; `offset` указывает на первый байт пиксельных данных."""
    magic: str
    width: int
    height: int
    max_value: Optional[int]
    offset: int


class _HeaderReader:
    """Последовательное чтение токенов заголовка с пропуском пробелов и комментариев."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.pos = 0

    def next_token(self) -> Optional[bytes]:
        data = self._data
        n = len(data)
        while self.pos < n:
            c = data[self.pos]
            if c in _WHITESPACE:
                self.pos += 1
            elif c == _COMMENT:
                eol = data.find(b"\n", self.pos)
                self.pos = n if eol == -1 else eol + 1
            else:
                break
        if self.pos >= n:
            return None
        start = self.pos
        while self.pos < n and data[self.pos] not in _WHITESPACE and data[self.pos] != _COMMENT:
            self.pos += 1
        return data[start:self.pos]

    def data_offset(self) -> int:
        # exactly one whitespace byte separates the header from the raster
        if self.pos < len(self._data) and self._data[self.pos] in _WHITESPACE:
            return self.pos + 1
        return self.pos


def parse_header(data: bytes, allowed: Tuple[str, ...] = tuple(_IMAGE_TYPES)) -> Header:
    """Разбирает заголовок netpbm.

    Args:
        data: Содержимое файла целиком.
        allowed: Допустимые magic numbers для ожидаемого типа изображения.

    Returns:
        `Header` с размерами, max value (для grayscale) и смещением пиксельных данных.

    Raises:
        UnsupportedMagicError: первый токен не входит в `allowed`.
        InvalidDimensionsError: нет двух положительных целых ширины и высоты.
        InvalidMaxValueError: max value отсутствует или вне [1, 255].
    """
    reader = _HeaderReader(data)
    token = reader.next_token()
    magic = "" if token is None else token.decode("latin-1")
    if magic not in allowed:
        raise UnsupportedMagicError(magic, tuple(allowed))

    dims = []
    for name in ("width", "height"):
        token = reader.next_token()
        if token is None or not token.isdigit() or int(token) <= 0:
            shown = None if token is None else token.decode("latin-1")
            raise InvalidDimensionsError(f"invalid {name} in header: {shown!r}")
        dims.append(int(token))
    width, height = dims

    max_value = None
    if _IMAGE_TYPES[magic][0] is GrayscaleImage:
        token = reader.next_token()
        if token is None or not token.isdigit() or not 1 <= int(token) <= MAX_VALUE_LIMIT:
            shown = None if token is None else token.decode("latin-1")
            raise InvalidMaxValueError(f"max value must be an integer in [1, {MAX_VALUE_LIMIT}], got {shown!r}")
        max_value = int(token)

    header = Header(magic, width, height, max_value, reader.data_offset())
    logger.debug("Parsed header %s %dx%d max=%s offset=%d", magic, width, height, max_value, header.offset)
    return header


# ---------- Decoders ----------
def _pixel_lines(raw: bytes):
    """Непустые строки пиксельной секции без комментариев."""
    for line in raw.splitlines():
        line = line.split(b"#", 1)[0]
        if line.strip():
            yield line


def _allocate(header: Header, dtype, fill_zero: bool = False) -> np.ndarray:
    shape = (header.height, header.width)
    try:
        return np.zeros(shape, dtype=dtype) if fill_zero else np.empty(shape, dtype=dtype)
    except (ValueError, OverflowError, MemoryError) as exc:
        raise InvalidDimensionsError(f"cannot allocate {header.width}x{header.height} image: {exc}") from exc


def _raster_start(header: Header, data: bytes, need: int) -> int:
    """Начало растра P4/P5.

    Пробелы до конца строки заголовка пропускаются вместе с переводом строки,
    если после этого данных всё ещё хватает на весь растр.
    """
    start = header.offset
    eol = data.find(b"\n", start)
    if eol != -1 and not data[start:eol].strip(_WHITESPACE) and len(data) - (eol + 1) >= need:
        logger.debug("Skipping trailing header whitespace at %d", start)
        return eol + 1
    return start


def _decode_p1(header: Header, data: bytes, settings: CodecSettings) -> BitmapImage:
    width, height = header.width, header.height
    lines = []
    for line in _pixel_lines(data[header.offset:]):
        lines.append(line)
        if len(lines) == height:
            break
    if len(lines) < height:
        raise UnexpectedEndOfDataError(len(lines), f"expected {height} rows")
    grid = _allocate(header, np.bool_, fill_zero=True)
    for row, line in enumerate(lines):
        tokens = line.split()[:width]
        for column, token in enumerate(tokens):
            if token == b"1":
                grid[row, column] = True
            elif token != b"0":
                raise InvalidPixelTokenError(token.decode("latin-1"), row, column)
        if len(tokens) < width:
            if settings.strict_rows:
                raise UnexpectedEndOfDataError(row, f"{len(tokens)} of {width} pixels")
            # lenient: missing trailing pixels stay white
            logger.debug("Row %d has %d of %d pixels, padding with 0", row, len(tokens), width)
    return BitmapImage(width, height, variant=Variant.ASCII, pixels=grid)


def _decode_p4(header: Header, data: bytes, settings: CodecSettings) -> BitmapImage:
    width, height = header.width, header.height
    row_bytes = (width + 7) // 8
    need = row_bytes * height
    start = _raster_start(header, data, need)
    raw = data[start:start + need]
    if len(raw) < need:
        raise UnexpectedEndOfDataError(len(raw) // row_bytes, f"expected {need} bytes, got {len(raw)}")
    packed = np.frombuffer(raw, dtype=np.uint8).reshape(height, row_bytes)
    grid = np.empty((height, width), dtype=np.bool_)
    grid[:] = np.unpackbits(packed, axis=1)[:, :width]
    return BitmapImage(width, height, variant=Variant.BINARY, pixels=grid)


def _decode_p2(header: Header, data: bytes, settings: CodecSettings) -> GrayscaleImage:
    width, height, max_value = header.width, header.height, header.max_value
    total = width * height
    tokens = [token for line in _pixel_lines(data[header.offset:]) for token in line.split()]
    for index, token in enumerate(tokens[:total]):
        if not token.isdigit():
            row, column = divmod(index, width)
            raise InvalidPixelTokenError(token.decode("latin-1"), row, column)
        value = int(token)
        if value > max_value:
            row, column = divmod(index, width)
            raise PixelExceedsMaxValueError(value, max_value, row, column)
    if len(tokens) < total:
        raise UnexpectedEndOfDataError(len(tokens) // width, f"expected {total} pixels, got {len(tokens)}")
    grid = _allocate(header, np.uint8)
    grid.ravel()[:] = [int(token) for token in tokens[:total]]
    return GrayscaleImage(width, height, max_value=max_value, variant=Variant.ASCII, pixels=grid)


def _decode_p5(header: Header, data: bytes, settings: CodecSettings) -> GrayscaleImage:
    width, height, max_value = header.width, header.height, header.max_value
    need = width * height
    start = _raster_start(header, data, need)
    raw = data[start:start + need]
    if len(raw) < need:
        raise UnexpectedEndOfDataError(len(raw) // width, f"expected {need} bytes, got {len(raw)}")
    grid = np.frombuffer(raw, dtype=np.uint8).reshape(height, width).copy()
    over = np.argwhere(grid > max_value)
    if len(over):
        row, column = (int(v) for v in over[0])
        raise PixelExceedsMaxValueError(int(grid[row, column]), max_value, row, column)
    return GrayscaleImage(width, height, max_value=max_value, variant=Variant.BINARY, pixels=grid)


_DECODERS: Dict[str, Callable[[Header, bytes, CodecSettings], RasterImage]] = {
    "P1": _decode_p1,
    "P4": _decode_p4,
    "P2": _decode_p2,
    "P5": _decode_p5,
}


def _decode_as(data: bytes, allowed: Tuple[str, ...], settings: CodecSettings) -> RasterImage:
    header = parse_header(data, allowed)
    decoder = _DECODERS.get(header.magic)
    if decoder is None:
        raise UnsupportedVariantError(header.magic)
    return decoder(header, data, settings)


def decode(data: bytes, settings: CodecSettings = DEFAULT_SETTINGS) -> AnyImage:
    """Декодирует P1/P2/P4/P5, определяя тип изображения по magic number."""
    return _decode_as(bytes(data), tuple(_IMAGE_TYPES), settings)


def decode_bitmap(data: bytes, settings: CodecSettings = DEFAULT_SETTINGS) -> BitmapImage:
    return _decode_as(bytes(data), ("P1", "P4"), settings)


def decode_grayscale(data: bytes, settings: CodecSettings = DEFAULT_SETTINGS) -> GrayscaleImage:
    return _decode_as(bytes(data), ("P2", "P5"), settings)


# ---------- Encoders ----------
def _encode_p1(image: BitmapImage) -> bytes:
    return b"".join(b" ".join(b"1" if v else b"0" for v in row) + b"\n" for row in image.rows())


def _encode_p4(image: BitmapImage) -> bytes:
    return np.packbits(image.pixels, axis=1).tobytes()


def _encode_p2(image: GrayscaleImage) -> bytes:
    return b"".join(" ".join(map(str, row.tolist())).encode("ascii") + b"\n" for row in image.rows())


def _encode_p5(image: GrayscaleImage) -> bytes:
    return np.ascontiguousarray(image.pixels).tobytes()


_ENCODERS: Dict[str, Callable] = {
    "P1": _encode_p1,
    "P4": _encode_p4,
    "P2": _encode_p2,
    "P5": _encode_p5,
}


def encode_header(image: RasterImage, comment: Optional[str] = None) -> bytes:
    lines = [image.magic_number]
    if comment:
        lines.extend(f"# {text}".rstrip() for text in comment.splitlines())
    lines.append(f"{image.width} {image.height}")
    if isinstance(image, GrayscaleImage):
        lines.append(str(image.max_value))
    return ("\n".join(lines) + "\n").encode("ascii", errors="replace")


def encode(image: RasterImage, comment: Optional[str] = None) -> bytes:
    """Сериализует изображение в его текущей кодировке (`image.variant`).

    Кодирование не зависит от содержимого пикселей и не может завершиться ошибкой
    формата: инвариант модели гарантирует допустимые значения.
    """
    try:
        magic = image.magic_number
    except KeyError as exc:
        raise UnsupportedVariantError(getattr(image, "variant", None)) from exc
    encoder = _ENCODERS.get(magic)
    if encoder is None:
        raise UnsupportedVariantError(image.variant)
    return encode_header(image, comment) + encoder(image)
