"""Vector shapes built from closed contours of line and Bezier segments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntFlag
from typing import ClassVar, Sequence

from sdfshape.geometry import Point2, Vector2, cross_product, dot_product, mix


class EdgeColor(IntFlag):
    """The colour channels an edge belongs to."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class EdgeSegment(ABC):
    """An edge segment defined by its control points."""

    edge_type: ClassVar[int] = 0
    point_count: ClassVar[int] = 0

    __slots__ = ("p", "color")

    def __init__(self, *points: Point2, color: EdgeColor = EdgeColor.WHITE) -> None:
        if len(points) != self.point_count:
            raise ValueError(
                f"{type(self).__name__} needs {self.point_count} points, got {len(points)}"
            )
        self.p: list[Point2] = list(points)
        self.color = EdgeColor(color)

    @property
    def control_points(self) -> tuple[Point2, ...]:
        """The control points, start point first."""
        return tuple(self.p)

    @abstractmethod
    def point(self, param: float) -> Point2:
        """Return the point on the edge at ``param`` (0 is the start, 1 the end)."""

    def reverse(self) -> None:
        """Swap the start and end of the edge."""
        self.p.reverse()

    @abstractmethod
    def move_start_point(self, to: Point2) -> None:
        """Move the start point of the edge to ``to``."""

    @abstractmethod
    def move_end_point(self, to: Point2) -> None:
        """Move the end point of the edge to ``to``."""

    def clone(self) -> EdgeSegment:
        """Return an independent copy."""
        return type(self)(*self.p, color=self.color)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EdgeSegment):
            return NotImplemented
        return type(self) is type(other) and self.p == other.p and self.color == other.color

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        points = ", ".join(f"({pt.x!r}, {pt.y!r})" for pt in self.p)
        return f"{type(self).__name__}({points}, color={self.color.name})"


class LinearSegment(EdgeSegment):
    """A straight line segment."""

    edge_type = 1
    point_count = 2
    __slots__ = ()

    def point(self, param: float) -> Point2:
        return mix(self.p[0], self.p[1], param)

    def move_start_point(self, to: Point2) -> None:
        self.p[0] = to

    def move_end_point(self, to: Point2) -> None:
        self.p[1] = to


class QuadraticSegment(EdgeSegment):
    """A quadratic Bezier curve."""

    edge_type = 2
    point_count = 3
    __slots__ = ()

    def point(self, param: float) -> Point2:
        p0, p1, p2 = self.p
        return mix(mix(p0, p1, param), mix(p1, p2, param), param)

    def move_start_point(self, to: Point2) -> None:
        p0, p1, p2 = self.p
        orig_start_dir = p0 - p1
        denominator = cross_product(p0 - p1, p2 - p1)
        if denominator:
            p1 = p1 + cross_product(p0 - p1, to - p0) / denominator * (p2 - p1)
        self.p[0] = to
        self.p[1] = p1
        if dot_product(orig_start_dir, to - p1) < 0:
            self.p[1] = self.p[1] if not denominator else _unchanged(orig_start_dir, p0)

    def move_end_point(self, to: Point2) -> None:
        p0, p1, p2 = self.p
        orig_end_dir = p2 - p1
        original_control = p1
        denominator = cross_product(p2 - p1, p0 - p1)
        if denominator:
            p1 = p1 + cross_product(p2 - p1, to - p2) / denominator * (p0 - p1)
        self.p[1] = p1
        self.p[2] = to
        if dot_product(orig_end_dir, to - p1) < 0:
            self.p[1] = original_control


def _unchanged(start_dir: Vector2, start: Point2) -> Point2:
    # The original control point is the old start point minus its direction.
    return start - start_dir


class CubicSegment(EdgeSegment):
    """A cubic Bezier curve."""

    edge_type = 3
    point_count = 4
    __slots__ = ()

    def point(self, param: float) -> Point2:
        p0, p1, p2, p3 = self.p
        p12 = mix(p1, p2, param)
        return mix(
            mix(mix(p0, p1, param), p12, param),
            mix(p12, mix(p2, p3, param), param),
            param,
        )

    def move_start_point(self, to: Point2) -> None:
        self.p[1] = self.p[1] + (to - self.p[0])
        self.p[0] = to

    def move_end_point(self, to: Point2) -> None:
        self.p[2] = self.p[2] + (to - self.p[3])
        self.p[3] = to


_SEGMENT_BY_POINT_COUNT = {cls.point_count: cls for cls in (LinearSegment, QuadraticSegment, CubicSegment)}


def make_edge(points: Sequence[Point2], color: EdgeColor = EdgeColor.WHITE) -> EdgeSegment:
    """Create a linear, quadratic or cubic segment from 2, 3 or 4 points."""
    try:
        cls = _SEGMENT_BY_POINT_COUNT[len(points)]
    except KeyError:
        raise ValueError(f"an edge needs 2 to 4 points, got {len(points)}") from None
    return cls(*points, color=color)


@dataclass
class Contour:
    """A single closed contour of a shape."""

    edges: list[EdgeSegment] = field(default_factory=list)

    def add_edge(self, edge: EdgeSegment) -> EdgeSegment:
        """Append an edge and return it."""
        self.edges.append(edge)
        return edge

    def reverse(self) -> None:
        """Reverse the direction of the contour."""
        self.edges.reverse()
        for edge in self.edges:
            edge.reverse()


@dataclass
class Bounds:
    """An axis-aligned bounding box."""

    l: float
    b: float
    r: float
    t: float


@dataclass
class Shape:
    """A vector shape made of contours."""

    contours: list[Contour] = field(default_factory=list)
    inverse_y_axis: bool = False

    def add_contour(self, contour: Contour | None = None) -> Contour:
        """Append a contour (a new empty one if none is given) and return it."""
        if contour is None:
            contour = Contour()
        self.contours.append(contour)
        return contour

    def validate(self) -> bool:
        """Return True if every contour is closed and its edges join up."""
        for contour in self.contours:
            if not contour.edges:
                continue
            corner = contour.edges[-1].point(1)
            for edge in contour.edges:
                if edge is None or edge.point(0) != corner:
                    return False
                corner = edge.point(1)
        return True

    def edge_count(self) -> int:
        """Return the total number of edges."""
        return sum(len(contour.edges) for contour in self.contours)