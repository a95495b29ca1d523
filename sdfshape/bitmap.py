"""Rectangular multi-channel pixel buffers and bilinear sampling."""

from __future__ import annotations

import math
from array import array
from enum import Enum
from numbers import Real
from typing import Iterable, Sequence, Union

from sdfshape.geometry import Vector2, clamp, mix


class PixelType(Enum):
    """Storage type of a bitmap's channel values."""

    BYTE = "B"
    FLOAT = "f"


PixelValue = Union[Real, Sequence[Real]]


class Bitmap:
    """A width x height grid of pixels with a fixed number of channels.

    Rows are stored bottom to top in the order of increasing y; each pixel's
    channels are stored next to each other.
    """

    __slots__ = ("width", "height", "channels", "pixel_type", "_data")

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        channels: int = 1,
        pixel_type: PixelType = PixelType.FLOAT,
    ) -> None:
        _check_dimensions(width, height, channels)
        self.width = width
        self.height = height
        self.channels = channels
        self.pixel_type = pixel_type
        self._data = array(pixel_type.value, [0]) * (width * height * channels)

    @classmethod
    def from_pixels(
        cls,
        pixels: Iterable[Real],
        width: int,
        height: int,
        channels: int = 1,
        pixel_type: PixelType = PixelType.FLOAT,
    ) -> Bitmap:
        """Build a bitmap from a flat sequence of channel values."""
        _check_dimensions(width, height, channels)
        data = _to_array(pixel_type, pixels)
        expected = width * height * channels
        if len(data) != expected:
            raise ValueError(f"expected {expected} channel values, got {len(data)}")
        bitmap = cls.__new__(cls)
        bitmap.width = width
        bitmap.height = height
        bitmap.channels = channels
        bitmap.pixel_type = pixel_type
        bitmap._data = data
        return bitmap

    @property
    def data(self) -> array:
        """The flat channel storage, shared with the bitmap."""
        return self._data

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} bitmap")
        return self.channels * (self.width * y + x)

    def pixel(self, x: int, y: int) -> tuple:
        """Return the channel values of the pixel at (x, y)."""
        start = self._offset(x, y)
        return tuple(self._data[start : start + self.channels])

    def set_pixel(self, x: int, y: int, value: PixelValue) -> None:
        """Set the pixel at (x, y) from a scalar (one channel) or a sequence."""
        start = self._offset(x, y)
        values = [value] if isinstance(value, Real) else list(value)
        if len(values) != self.channels:
            raise ValueError(f"expected {self.channels} channel values, got {len(values)}")
        self._data[start : start + self.channels] = _to_array(self.pixel_type, values)

    def row(self, y: int) -> list:
        """Return the channel values of row y, left to right, as a flat list."""
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} outside bitmap of height {self.height}")
        stride = self.channels * self.width
        return list(self._data[y * stride : (y + 1) * stride])

    def copy(self) -> Bitmap:
        """Return an independent copy."""
        return Bitmap.from_pixels(self._data, self.width, self.height, self.channels, self.pixel_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.channels == other.channels
            and self.pixel_type is other.pixel_type
            and self._data == other._data
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Bitmap(width={self.width}, height={self.height}, "
            f"channels={self.channels}, pixel_type={self.pixel_type.name})"
        )


def _check_dimensions(width: int, height: int, channels: int) -> None:
    if width < 0 or height < 0:
        raise ValueError(f"invalid bitmap dimensions {width}x{height}")
    if channels < 1:
        raise ValueError(f"invalid channel count {channels}")


def _to_array(pixel_type: PixelType, values: Iterable[Real]) -> array:
    try:
        return array(pixel_type.value, values)
    except OverflowError as exc:
        raise ValueError(f"channel value out of range for {pixel_type.name}") from exc


def interpolate(bitmap: Bitmap, pos: Vector2) -> tuple:
    """Sample the bitmap bilinearly at ``pos``, pixel centres lying at half-integers."""
    if bitmap.width == 0 or bitmap.height == 0:
        raise ValueError("cannot interpolate an empty bitmap")
    pos = pos - 0.5
    left = math.floor(pos.x)
    bottom = math.floor(pos.y)
    right = left + 1
    top = bottom + 1
    lr = pos.x - left
    bt = pos.y - bottom
    left, right = clamp(left, bitmap.width - 1), clamp(right, bitmap.width - 1)
    bottom, top = clamp(bottom, bitmap.height - 1), clamp(top, bitmap.height - 1)
    cast = int if bitmap.pixel_type is PixelType.BYTE else float
    lb = bitmap.pixel(left, bottom)
    rb = bitmap.pixel(right, bottom)
    lt = bitmap.pixel(left, top)
    rt = bitmap.pixel(right, top)
    return tuple(
        cast(mix(cast(mix(a, b, lr)), cast(mix(c, d, lr)), bt))
        for a, b, c, d in zip(lb, rb, lt, rt)
    )