"""Planar vectors, signed distances and small numeric helpers."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Iterator, Union

Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class Vector2:
    """A two-dimensional floating-point vector, also used as a point."""

    x: float = 0.0
    y: float = 0.0

    def squared_length(self) -> float:
        """Return the squared Euclidean length."""
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalize(self, allow_zero: bool = False) -> Vector2:
        """Return a unit vector in the same direction.

        A zero vector becomes (0, 1), or stays zero when ``allow_zero`` is set.
        """
        length = self.length()
        if length:
            return Vector2(self.x / length, self.y / length)
        return Vector2(0.0, 0.0 if allow_zero else 1.0)

    def orthogonal(self, polarity: bool = True) -> Vector2:
        """Return a vector of the same length perpendicular to this one."""
        return Vector2(-self.y, self.x) if polarity else Vector2(self.y, -self.x)

    def orthonormal(self, polarity: bool = True, allow_zero: bool = False) -> Vector2:
        """Return a unit vector perpendicular to this one."""
        length = self.length()
        if length:
            if polarity:
                return Vector2(-self.y / length, self.x / length)
            return Vector2(self.y / length, -self.x / length)
        unit = 0.0 if allow_zero else 1.0
        return Vector2(0.0, unit if polarity else -unit)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __bool__(self) -> bool:
        return bool(self.x or self.y)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __pos__(self) -> Vector2:
        return self

    def __add__(self, other: object) -> Vector2:
        o = _as_vector(other)
        if o is None:
            return NotImplemented
        return Vector2(self.x + o.x, self.y + o.y)

    __radd__ = __add__

    def __sub__(self, other: object) -> Vector2:
        o = _as_vector(other)
        if o is None:
            return NotImplemented
        return Vector2(self.x - o.x, self.y - o.y)

    def __rsub__(self, other: object) -> Vector2:
        o = _as_vector(other)
        if o is None:
            return NotImplemented
        return Vector2(o.x - self.x, o.y - self.y)

    def __mul__(self, other: object) -> Vector2:
        o = _as_vector(other)
        if o is None:
            return NotImplemented
        return Vector2(self.x * o.x, self.y * o.y)

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Vector2:
        o = _as_vector(other)
        if o is None:
            return NotImplemented
        return Vector2(self.x / o.x, self.y / o.y)

    def __rtruediv__(self, other: object) -> Vector2:
        o = _as_vector(other)
        if o is None:
            return NotImplemented
        return Vector2(o.x / self.x, o.y / self.y)


Point2 = Vector2


def _as_vector(value: object) -> Vector2 | None:
    if isinstance(value, Vector2):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Vector2(float(value), float(value))
    return None


@dataclass(slots=True)
class SignedDistance:
    """A signed distance with an alignment used to break ties between edges."""

    distance: float = -sys.float_info.max
    dot: float = 0.0

    def __lt__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot < other.dot)

    def __gt__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot > other.dot)

    def __le__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot <= other.dot)

    def __ge__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot >= other.dot)


def dot_product(a: Vector2, b: Vector2) -> float:
    """Return the dot product of two vectors."""
    return a.x * b.x + a.y * b.y


def cross_product(a: Vector2, b: Vector2) -> float:
    """Return the scalar two-dimensional cross product."""
    return a.x * b.y - a.y * b.x


def median(a, b, c):
    """Return the middle one of three values."""
    return max(min(a, b), min(max(a, b), c))


def mix(a, b, weight):
    """Return the weighted average of ``a`` and ``b``."""
    return (1 - weight) * a + weight * b


def clamp(n, *args):
    """Clamp ``n`` to [0, 1], [0, b] or [a, b] depending on the bounds given."""
    if not args:
        if 0 <= n <= 1:
            return n
        return type(n)(n > 0)
    if len(args) == 1:
        (upper,) = args
        if 0 <= n <= upper:
            return n
        return upper if n > 0 else 0 * upper
    if len(args) == 2:
        lower, upper = args
        if lower <= n <= upper:
            return n
        return lower if n < lower else upper
    raise TypeError(f"clamp() takes at most 3 arguments ({len(args) + 1} given)")


def sign(n: Number) -> int:
    """Return 1 for positive, -1 for negative and 0 for zero."""
    return int(0 < n) - int(n < 0)


def non_zero_sign(n: Number) -> int:
    """Return 1 for positive values and -1 otherwise."""
    return 2 * int(n > 0) - 1


def pixel_float_to_byte(x: float) -> int:
    """Convert a pixel value in [0, 1] to an 8-bit value."""
    return int(clamp(256.0 * x, 255.0))


def pixel_byte_to_float(x: int) -> float:
    """Convert an 8-bit pixel value to [0, 1]."""
    return 1.0 / 255.0 * float(x)