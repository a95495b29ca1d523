"""Saving bitmaps as PNG, raw binary and text images."""

from __future__ import annotations

import struct
import zlib
from enum import Enum
from os import PathLike
from typing import Callable, Iterator, Union

from sdfshape.bitmap import Bitmap, PixelType
from sdfshape.geometry import pixel_float_to_byte

FileName = Union[str, PathLike]

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_PNG_COLOR_TYPES = {1: 0, 3: 2, 4: 6}


class ImageFormat(Enum):
    """Atlas image encoding."""

    UNSPECIFIED = "unspecified"
    PNG = "png"
    BMP = "bmp"
    TIFF = "tiff"
    TEXT = "text"
    TEXT_FLOAT = "textfloat"
    BINARY = "bin"
    BINARY_FLOAT = "binfloat"
    BINARY_FLOAT_BE = "binfloatbe"


class YDirection(Enum):
    """Direction of the Y axis of the written image."""

    BOTTOM_UP = "bottom-up"
    TOP_DOWN = "top-down"


class UnsupportedFormatError(ValueError):
    """Raised when a bitmap cannot be written in the requested format."""


def _require_type(bitmap: Bitmap, pixel_type: PixelType, what: str) -> None:
    if bitmap.pixel_type is not pixel_type:
        raise UnsupportedFormatError(
            f"{what} needs a {pixel_type.name.lower()} bitmap, got {bitmap.pixel_type.name.lower()}"
        )


def _rows(bitmap: Bitmap, y_direction: YDirection) -> Iterator[list]:
    """Yield the rows in file order: storage order for bottom-up, reversed for top-down."""
    ys = range(bitmap.height)
    if y_direction is YDirection.TOP_DOWN:
        ys = reversed(ys)
    for y in ys:
        yield bitmap.row(y)


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(payload, zlib.crc32(kind)) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)


def encode_png(bitmap: Bitmap) -> bytes:
    """Encode a 1, 3 or 4 channel bitmap as 8-bit PNG data.

    The first row of the image is the bitmap's topmost row. Float values are
    converted to bytes; byte values are stored as they are.
    """
    try:
        color_type = _PNG_COLOR_TYPES[bitmap.channels]
    except KeyError:
        raise UnsupportedFormatError(
            f"PNG needs 1, 3 or 4 channels, got {bitmap.channels}"
        ) from None
    if bitmap.width == 0 or bitmap.height == 0:
        raise ValueError("cannot encode an empty image as PNG")
    if bitmap.pixel_type is PixelType.BYTE:
        convert: Callable[[list], bytes] = bytes
    else:
        def convert(row: list) -> bytes:
            return bytes(pixel_float_to_byte(v) for v in row)
    raw = b"".join(b"\x00" + convert(row) for row in _rows(bitmap, YDirection.TOP_DOWN))
    header = struct.pack(">IIBBBBB", bitmap.width, bitmap.height, 8, color_type, 0, 0, 0)
    return (
        _PNG_SIGNATURE
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(raw))
        + _png_chunk(b"IEND", b"")
    )


def save_png(bitmap: Bitmap, filename: FileName) -> None:
    """Write the bitmap as a PNG file."""
    data = encode_png(bitmap)
    with open(filename, "wb") as f:
        f.write(data)


def save_image_binary(
    bitmap: Bitmap, filename: FileName, y_direction: YDirection = YDirection.BOTTOM_UP
) -> None:
    """Write the raw bytes of a byte bitmap."""
    _require_type(bitmap, PixelType.BYTE, "binary output")
    with open(filename, "wb") as f:
        for row in _rows(bitmap, y_direction):
            f.write(bytes(row))


def _save_float_binary(bitmap: Bitmap, filename: FileName, y_direction: YDirection, order: str) -> None:
    _require_type(bitmap, PixelType.FLOAT, "float binary output")
    with open(filename, "wb") as f:
        for row in _rows(bitmap, y_direction):
            f.write(struct.pack(f"{order}{len(row)}f", *row))


def save_image_binary_le(
    bitmap: Bitmap, filename: FileName, y_direction: YDirection = YDirection.BOTTOM_UP
) -> None:
    """Write a float bitmap as little-endian 32-bit floats."""
    _save_float_binary(bitmap, filename, y_direction, "<")


def save_image_binary_be(
    bitmap: Bitmap, filename: FileName, y_direction: YDirection = YDirection.BOTTOM_UP
) -> None:
    """Write a float bitmap as big-endian 32-bit floats."""
    _save_float_binary(bitmap, filename, y_direction, ">")


def save_image_text(
    bitmap: Bitmap, filename: FileName, y_direction: YDirection = YDirection.BOTTOM_UP
) -> None:
    """Write one line per row of space-separated values.

    Byte values are written as two hex digits, float values in ``%g`` form.
    """
    template = "%02X" if bitmap.pixel_type is PixelType.BYTE else "%g"
    with open(filename, "wb") as f:
        for row in _rows(bitmap, y_direction):
            line = " ".join(template % value for value in row) + "\n"
            f.write(line.encode("ascii"))


def _unsupported(image_format: ImageFormat, bitmap: Bitmap) -> UnsupportedFormatError:
    return UnsupportedFormatError(
        f"format {image_format.name} is not available for {bitmap.pixel_type.name.lower()} bitmaps"
    )


def save_image(
    bitmap: Bitmap,
    image_format: ImageFormat,
    filename: FileName,
    y_direction: YDirection = YDirection.BOTTOM_UP,
) -> None:
    """Write the bitmap in the given format.

    Raises UnsupportedFormatError if the format does not suit the bitmap's
    pixel type or cannot be written.
    """
    if bitmap.pixel_type is PixelType.BYTE:
        writers = {
            ImageFormat.TEXT: save_image_text,
            ImageFormat.BINARY: save_image_binary,
        }
    else:
        writers = {
            ImageFormat.TEXT_FLOAT: save_image_text,
            ImageFormat.BINARY_FLOAT: save_image_binary_le,
            ImageFormat.BINARY_FLOAT_BE: save_image_binary_be,
        }
    if image_format is ImageFormat.PNG:
        save_png(bitmap, filename)
        return
    writer = writers.get(image_format)
    if writer is None:
        raise _unsupported(image_format, bitmap)
    writer(bitmap, filename, y_direction)