"""Building shapes from SVG path data and SVG files."""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import IntFlag
from os import PathLike
from typing import IO, Union

from sdfshape.geometry import Point2, Vector2, clamp, cross_product, dot_product, non_zero_sign
from sdfshape.shape import Bounds, Contour, CubicSegment, LinearSegment, QuadraticSegment, Shape

_ARC_SEGMENTS_PER_PI = 2
_ENDPOINT_SNAP_RANGE_PROPORTION = 1 / 16384.0

_EXTRA_CHARS = ", \t\r\n"
_NUMBER = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE | re.ASCII,
)
_INTEGER = re.compile(r"\s*[+-]?[0-9]+", re.ASCII)

Source = Union[str, PathLike, IO]


class SvgImportFlags(IntFlag):
    """Outcome flags of reading the geometry of an SVG file."""

    FAILURE = 0x00
    SUCCESS = 0x01
    PARTIAL_FAILURE = 0x02
    INCOMPLETE = 0x04
    UNSUPPORTED_FEATURE = 0x08
    TRANSFORMATION_IGNORED = 0x10


_FINAL_FLAGS = SvgImportFlags.SUCCESS | SvgImportFlags.INCOMPLETE | SvgImportFlags.UNSUPPORTED_FEATURE


class SvgPathError(ValueError):
    """Raised when SVG path data is malformed or no usable path can be found."""


class _Reader:
    """A cursor over SVG path data."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text) or self.text[self.pos] == "\0"

    def skip_extra(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _EXTRA_CHARS:
            self.pos += 1

    def read_node_type(self) -> str | None:
        self.skip_extra()
        if self.at_end:
            return None
        c = self.text[self.pos]
        if c in "+-.," or "0" <= c <= "9":
            return None
        self.pos += 1
        return c

    def read_double(self) -> float | None:
        self.skip_extra()
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return float(match.group())

    def read_coord(self) -> Point2 | None:
        x = self.read_double()
        if x is None:
            return None
        y = self.read_double()
        if y is None:
            return None
        return Vector2(x, y)

    def read_bool(self) -> bool | None:
        self.skip_extra()
        match = _INTEGER.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return int(match.group()) != 0

    def require_coord(self) -> Point2:
        return self._require(self.read_coord(), "coordinate pair")

    def require_double(self) -> float:
        return self._require(self.read_double(), "number")

    def require_bool(self) -> bool:
        return self._require(self.read_bool(), "flag")

    def _require(self, value, what: str):
        if value is None:
            raise SvgPathError(f"expected {what} at offset {self.pos}")
        return value


def _arc_angle(u: Vector2, v: Vector2) -> float:
    denominator = u.length() * v.length()
    cosine = dot_product(u, v) / denominator if denominator else math.nan
    return non_zero_sign(cross_product(u, v)) * math.acos(clamp(cosine, -1.0, 1.0))


def _rotate_vector(v: Vector2, direction: Vector2) -> Vector2:
    return Vector2(direction.x * v.x - direction.y * v.y, direction.y * v.x + direction.x * v.y)


def _add_arc_approximate(
    contour: Contour,
    start_point: Point2,
    end_point: Point2,
    radius: Vector2,
    rotation: float,
    large_arc: bool,
    sweep: bool,
) -> None:
    if end_point == start_point:
        return
    if radius.x == 0 or radius.y == 0:
        contour.add_edge(LinearSegment(start_point, end_point))
        return

    radius = Vector2(abs(radius.x), abs(radius.y))
    axis = Vector2(math.cos(rotation), math.sin(rotation))

    rm = _rotate_vector(0.5 * (start_point - end_point), Vector2(axis.x, -axis.y))
    rm2 = rm * rm
    radius2 = radius * radius
    radius_gap = rm2.x / radius2.x + rm2.y / radius2.y
    if radius_gap > 1:
        radius = radius * math.sqrt(radius_gap)
        radius2 = radius * radius
    dq = radius2.x * rm2.y + radius2.y * rm2.x
    pq = radius2.x * radius2.y / dq - 1
    q = (-1 if large_arc == sweep else 1) * math.sqrt(max(pq, 0.0))
    rc = Vector2(q * radius.x * rm.y / radius.y, -q * radius.y * rm.x / radius.x)
    center = 0.5 * (start_point + end_point) + _rotate_vector(rc, axis)

    angle_start = _arc_angle(Vector2(1.0, 0.0), (rm - rc) / radius)
    angle_extent = _arc_angle((rm - rc) / radius, (-rm - rc) / radius)
    if not sweep and angle_extent > 0:
        angle_extent -= 2 * math.pi
    elif sweep and angle_extent < 0:
        angle_extent += 2 * math.pi

    segments = math.ceil(_ARC_SEGMENTS_PER_PI / math.pi * abs(angle_extent))
    if segments <= 0:
        return
    angle_increment = angle_extent / segments
    cl = 4 / 3.0 * math.sin(0.5 * angle_increment) / (1 + math.cos(0.5 * angle_increment))

    prev_node = start_point
    angle = angle_start
    for i in range(segments):
        d = Vector2(math.cos(angle), math.sin(angle))
        control0 = center + _rotate_vector(Vector2(d.x - cl * d.y, d.y + cl * d.x) * radius, axis)
        angle += angle_increment
        d = Vector2(math.cos(angle), math.sin(angle))
        control1 = center + _rotate_vector(Vector2(d.x + cl * d.y, d.y - cl * d.x) * radius, axis)
        node = end_point if i == segments - 1 else center + _rotate_vector(d * radius, axis)
        contour.add_edge(CubicSegment(prev_node, control0, control1, node))
        prev_node = node


def parse_svg_path(path_def: str, endpoint_snap_range: float = 0.0, shape: Shape | None = None) -> Shape:
    """Add the contours described by SVG path data to ``shape`` and return it.

    A new shape is created when none is given. A contour left open is closed
    by moving its last end point onto its start when the gap is shorter than
    ``endpoint_snap_range``, or by a line otherwise. Raises SvgPathError on
    malformed data.
    """
    if shape is None:
        shape = Shape()
    reader = _Reader(path_def)
    node_type = ""
    prev_node_type = ""
    prev_node = Vector2(0.0, 0.0)
    preread = False
    while True:
        if not preread:
            read = reader.read_node_type()
            if read is None:
                break
            node_type = read
        preread = False
        contour = shape.add_contour()
        contour_start = True

        start_point = Vector2()
        control0 = Vector2()
        control1 = Vector2()
        node = Vector2()

        while not reader.at_end:
            if node_type in ("M", "m"):
                if not contour_start:
                    preread = True
                    break
                node = reader.require_coord()
                if node_type == "m":
                    node = node + prev_node
                start_point = node
                node_type = "L" if node_type == "M" else "l"
            elif node_type in ("Z", "z"):
                if contour_start:
                    raise SvgPathError(f"close command before any segment at offset {reader.pos}")
                break
            elif node_type in ("L", "l"):
                node = reader.require_coord()
                if node_type == "l":
                    node = node + prev_node
                contour.add_edge(LinearSegment(prev_node, node))
            elif node_type in ("H", "h"):
                x = reader.require_double()
                if node_type == "h":
                    x += prev_node.x
                node = Vector2(x, node.y)
                contour.add_edge(LinearSegment(prev_node, node))
            elif node_type in ("V", "v"):
                y = reader.require_double()
                if node_type == "v":
                    y += prev_node.y
                node = Vector2(node.x, y)
                contour.add_edge(LinearSegment(prev_node, node))
            elif node_type in ("Q", "q"):
                control0 = reader.require_coord()
                node = reader.require_coord()
                if node_type == "q":
                    control0 = control0 + prev_node
                    node = node + prev_node
                contour.add_edge(QuadraticSegment(prev_node, control0, node))
            elif node_type in ("T", "t"):
                if prev_node_type in ("Q", "q", "T", "t"):
                    control0 = node + node - control0
                else:
                    control0 = node
                node = reader.require_coord()
                if node_type == "t":
                    node = node + prev_node
                contour.add_edge(QuadraticSegment(prev_node, control0, node))
            elif node_type in ("C", "c"):
                control0 = reader.require_coord()
                control1 = reader.require_coord()
                node = reader.require_coord()
                if node_type == "c":
                    control0 = control0 + prev_node
                    control1 = control1 + prev_node
                    node = node + prev_node
                contour.add_edge(CubicSegment(prev_node, control0, control1, node))
            elif node_type in ("S", "s"):
                if prev_node_type in ("C", "c", "S", "s"):
                    control0 = node + node - control1
                else:
                    control0 = node
                control1 = reader.require_coord()
                node = reader.require_coord()
                if node_type == "s":
                    control1 = control1 + prev_node
                    node = node + prev_node
                contour.add_edge(CubicSegment(prev_node, control0, control1, node))
            elif node_type in ("A", "a"):
                radius = reader.require_coord()
                angle = reader.require_double()
                large_arc = reader.require_bool()
                sweep = reader.require_bool()
                node = reader.require_coord()
                if node_type == "a":
                    node = node + prev_node
                _add_arc_approximate(
                    contour, prev_node, node, radius, math.radians(angle), large_arc, sweep
                )
            else:
                raise SvgPathError(f"unknown path command {node_type!r}")
            contour_start = contour_start and node_type in ("M", "m")
            prev_node = node
            prev_node_type = node_type
            read = reader.read_node_type()
            if read is not None:
                node_type = read

        if contour.edges and prev_node != start_point:
            last = contour.edges[-1]
            first_point = contour.edges[0].point(0)
            if (last.point(1) - first_point).length() < endpoint_snap_range:
                last.move_end_point(first_point)
            else:
                contour.add_edge(LinearSegment(prev_node, start_point))
        prev_node = start_point
        prev_node_type = ""
    return shape


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


@dataclass
class _PathSearch:
    skips: int
    backward: bool
    path: ET.Element | None = None
    flags: SvgImportFlags = SvgImportFlags.FAILURE

    def visit(self, parent: ET.Element, has_transformation: bool) -> None:
        children = list(parent)
        if self.backward:
            children.reverse()
        for cur in children:
            if self.flags & _FINAL_FLAGS == _FINAL_FLAGS:
                break
            name = _local_name(cur.tag)
            if name == "path":
                if self.skips == 0:
                    self.path = cur
                    self.flags |= SvgImportFlags.SUCCESS
                    if has_transformation or "transform" in cur.attrib:
                        self.flags |= SvgImportFlags.TRANSFORMATION_IGNORED
                elif self.flags & SvgImportFlags.SUCCESS:
                    self.flags |= SvgImportFlags.INCOMPLETE
                self.skips -= 1
            elif name == "g":
                self.visit(cur, has_transformation or "transform" in cur.attrib)
            elif name in ("rect", "circle", "ellipse", "polygon"):
                self.flags |= SvgImportFlags.INCOMPLETE
            elif name in ("mask", "use"):
                self.flags |= SvgImportFlags.UNSUPPORTED_FEATURE


def _load_root(filename: Source) -> ET.Element:
    try:
        root = ET.parse(filename).getroot()
    except ET.ParseError as exc:
        raise SvgPathError(f"cannot parse SVG document: {exc}") from exc
    if _local_name(root.tag) != "svg":
        raise SvgPathError("document root is not an <svg> element")
    return root


def _double_attribute(element: ET.Element, name: str) -> float:
    value = element.get(name)
    if value is None:
        return 0.0
    match = _NUMBER.match(value.lstrip())
    return float(match.group()) if match else 0.0


def _read_view_box(text: str, defaults: list[float]) -> list[float]:
    reader = _Reader(text)
    values: list[float] = []
    for _ in defaults:
        value = reader.read_double()
        values.append(0.0 if value is None else value)
        if value is None:
            break
    values.extend(defaults[len(values):])
    return values


def _path_data(search: _PathSearch) -> str:
    if search.path is None:
        raise SvgPathError("no matching <path> element found")
    path_def = search.path.get("d")
    if path_def is None:
        raise SvgPathError("<path> element has no 'd' attribute")
    return path_def


def load_svg_shape(filename: Source, path_index: int = 0) -> tuple[Shape, Vector2]:
    """Read one <path> of an SVG file into a shape.

    A positive ``path_index`` counts paths from the first (1 is the first);
    zero or a negative index counts from the last (0 and -1 are the last).
    Returns the shape and the document's dimensions. Raises SvgPathError if
    the document or the path cannot be used.
    """
    root = _load_root(filename)
    skips = abs(path_index) - (path_index != 0)
    search = _PathSearch(skips=skips, backward=path_index <= 0)
    search.visit(root, False)
    path_def = _path_data(search)

    width = _double_attribute(root, "width")
    height = _double_attribute(root, "height")
    view_box = root.get("viewBox")
    if view_box is not None:
        _, _, width, height = _read_view_box(view_box, [0.0, 0.0, width, height])
    dimensions = Vector2(width, height)
    shape = Shape(inverse_y_axis=True)
    parse_svg_path(path_def, _ENDPOINT_SNAP_RANGE_PROPORTION * dimensions.length(), shape)
    return shape, dimensions


def load_svg_geometry(filename: Source) -> tuple[Shape, Bounds, SvgImportFlags]:
    """Read the last <path> of an SVG file into a shape.

    Returns the shape, the view box and the import flags, which tell whether
    other geometry or transformations were left out. Raises SvgPathError if
    nothing could be imported.
    """
    root = _load_root(filename)
    search = _PathSearch(skips=0, backward=True)
    search.visit(root, False)
    if not search.flags & SvgImportFlags.SUCCESS:
        raise SvgPathError("no <path> element found")
    path_def = _path_data(search)

    width = _double_attribute(root, "width")
    height = _double_attribute(root, "height")
    left, bottom = 0.0, 0.0
    view_box = root.get("viewBox")
    if view_box is not None:
        left, bottom, width, height = _read_view_box(view_box, [0.0, 0.0, width, height])
    dimensions = Vector2(width, height)
    bounds = Bounds(left, bottom, left + dimensions.x, bottom + dimensions.y)
    shape = Shape(inverse_y_axis=True)
    parse_svg_path(path_def, _ENDPOINT_SNAP_RANGE_PROPORTION * dimensions.length(), shape)
    return shape, bounds, search.flags