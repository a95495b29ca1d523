"""Reading and writing the plain-text shape description format."""

from __future__ import annotations

import re
from typing import IO

from sdfshape.geometry import Point2, Vector2
from sdfshape.shape import (
    Contour,
    CubicSegment,
    EdgeColor,
    EdgeSegment,
    LinearSegment,
    QuadraticSegment,
    Shape,
    make_edge,
)


class ShapeDescriptionError(ValueError):
    """Raised when a shape description is malformed or a shape cannot be written."""


_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf(?:inity)?|nan))",
    re.IGNORECASE | re.ASCII,
)
_BLANKS = " \t\r\n"
_INVERT_Y = "invert-y"
_COLOR_CODES = {
    "c": EdgeColor.CYAN,
    "m": EdgeColor.MAGENTA,
    "y": EdgeColor.YELLOW,
    "w": EdgeColor.WHITE,
}


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.colors_specified = False

    def read_char(self) -> str | None:
        text, pos = self.text, self.pos
        while pos < len(text) and text[pos] in _BLANKS:
            pos += 1
        if pos >= len(text):
            self.pos = pos
            return None
        self.pos = pos + 1
        return text[pos]

    def _read_double(self) -> float | None:
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return float(match.group(1))

    def read_coord(self) -> tuple[int, Point2 | None]:
        x = self._read_double()
        if x is None:
            return 0, None
        while self.pos < len(self.text) and self.text[self.pos] in _BLANKS:
            self.pos += 1
        if self.pos >= len(self.text) or self.text[self.pos] != ",":
            return 1, None
        self.pos += 1
        y = self._read_double()
        if y is None:
            return 1, None
        return 2, Vector2(x, y)

    def read_control_points(self) -> list[Point2] | None:
        count, first = self.read_coord()
        if count == 2:
            c = self.read_char()
            if c == ")":
                return [first]
            if c != ";":
                return None
            count, second = self.read_coord()
            if count == 2 and self.read_char() == ")":
                return [first, second]
        elif count != 1 and self.read_char() == ")":
            return []
        return None

    def read_contour(self, contour: Contour, first: Point2 | None, terminator: str | None) -> bool:
        if first is None:
            count, first = self.read_coord()
            if count != 2:
                return count != 1 and self.read_char() == terminator
        current = start = first
        while (c := self.read_char()) != terminator:
            if c != ";":
                return False
            color = EdgeColor.WHITE
            count, point = self.read_coord()
            if count == 2:
                contour.add_edge(LinearSegment(current, point, color=color))
                current = point
                continue
            if count == 1:
                return False
            controls: list[Point2] = []
            c = self.read_char()
            if c == "#":
                contour.add_edge(LinearSegment(current, start, color=color))
                current = start
                continue
            if c == "(":
                read = self.read_control_points()
                if read is None or self.read_char() != ";":
                    return False
                controls = read
            elif c is not None and c.lower() in _COLOR_CODES:
                color = _COLOR_CODES[c.lower()]
                self.colors_specified = True
                c = self.read_char()
                if c == "(":
                    read = self.read_control_points()
                    if read is None or self.read_char() != ";":
                        return False
                    controls = read
                elif c != ";":
                    return False
            elif c != ";":
                return c == terminator
            count, end = self.read_coord()
            if count != 2:
                if count == 1 or self.read_char() != "#":
                    return False
                end = start
            contour.add_edge(make_edge([current, *controls, end], color))
            current = end
        return True


def read_shape_description(text: str) -> tuple[Shape, bool]:
    """Parse a shape description.

    Returns the shape and whether any edge colours were given explicitly.
    Raises ShapeDescriptionError if the text is malformed.
    """
    parser = _Parser(text)
    shape = Shape()
    count, first = parser.read_coord()
    if count == 2:
        if not parser.read_contour(shape.add_contour(), first, None):
            raise ShapeDescriptionError(f"malformed contour near offset {parser.pos}")
        return shape, parser.colors_specified
    if count == 1:
        raise ShapeDescriptionError("incomplete coordinate at start of description")
    c = parser.read_char()
    if c == "@":
        if not text.startswith(_INVERT_Y, parser.pos):
            raise ShapeDescriptionError(f"unknown directive near offset {parser.pos}")
        shape.inverse_y_axis = True
        parser.pos += len(_INVERT_Y)
        c = parser.read_char()
    while c == "{":
        if not parser.read_contour(shape.add_contour(), None, "}"):
            raise ShapeDescriptionError(f"malformed contour near offset {parser.pos}")
        c = parser.read_char()
    if c is not None:
        raise ShapeDescriptionError(f"unexpected {c!r} near offset {parser.pos - 1}")
    return shape, parser.colors_specified


def read_shape_file(stream: IO) -> tuple[Shape, bool]:
    """Read a shape description from an open file."""
    data = stream.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return read_shape_description(data)


def _coord(point: Point2) -> str:
    return "%.12g, %.12g" % (point.x, point.y)


def _color_code(edge: EdgeSegment) -> str:
    for code, color in _COLOR_CODES.items():
        if edge.color == color:
            return code
    return ""


def write_shape_description(shape: Shape) -> str:
    """Serialize a shape into its text description.

    Raises ShapeDescriptionError if the shape is not valid.
    """
    if not shape.validate():
        raise ShapeDescriptionError("shape is not valid")
    write_colors = any(
        edge.color != EdgeColor.WHITE for contour in shape.contours for edge in contour.edges
    )
    parts: list[str] = []
    if shape.inverse_y_axis:
        parts.append("@invert-y\n")
    for contour in shape.contours:
        parts.append("{\n")
        if contour.edges:
            for edge in contour.edges:
                code = _color_code(edge) if write_colors else ""
                p = edge.control_points
                parts.append(f"\t{_coord(p[0])};\n")
                if isinstance(edge, LinearSegment):
                    if code:
                        parts.append(f"\t\t{code};\n")
                elif isinstance(edge, QuadraticSegment):
                    parts.append(f"\t\t{code}({_coord(p[1])});\n")
                elif isinstance(edge, CubicSegment):
                    parts.append(f"\t\t{code}({_coord(p[1])}; {_coord(p[2])});\n")
            parts.append("\t#\n")
        parts.append("}\n")
    return "".join(parts)


def write_shape_file(stream: IO[str], shape: Shape) -> None:
    """Write a shape's text description to an open text file."""
    stream.write(write_shape_description(shape))