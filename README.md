# sdfshape

Building blocks for signed distance field work, in pure Python with no dependencies beyond the standard library.

| Module | Contents |
| --- | --- |
| `sdfshape.geometry` | `Vector2` (also used as a point), `SignedDistance`, `dot_product`, `cross_product`, `median`, `mix`, `clamp`, `sign`, `non_zero_sign`, `pixel_float_to_byte`, `pixel_byte_to_float` |
| `sdfshape.bitmap` | `Bitmap` with `PixelType.FLOAT` or `PixelType.BYTE` channels, and `interpolate` for bilinear sampling |
| `sdfshape.shape` | `Shape`, `Contour`, `Bounds`, `EdgeColor`, and the edges `LinearSegment`, `QuadraticSegment`, `CubicSegment` |
| `sdfshape.shape_description` | reading and writing the text shape format |
| `sdfshape.svg_import` | SVG path data and SVG file import |
| `sdfshape.imaging` | PNG, raw binary and text image output |

## Installation

```
pip install .
```

To install with the test requirements:

```
pip install ".[test]"
```

## Shapes

```python
from sdfshape.geometry import Vector2
from sdfshape.shape import Shape, Contour, LinearSegment

contour = Contour()
contour.add_edge(LinearSegment(Vector2(0, 0), Vector2(1, 0)))
contour.add_edge(LinearSegment(Vector2(1, 0), Vector2(0, 1)))
contour.add_edge(LinearSegment(Vector2(0, 1), Vector2(0, 0)))

shape = Shape()
shape.add_contour(contour)
assert shape.validate()     # each contour is closed and its edges join up
print(shape.edge_count())   # 3
```

`make_edge(points, color)` chooses the segment type from the number of points. Two points give a line, three give a quadratic curve and four give a cubic curve. Any other number raises `ValueError`.

An edge supports these operations:

- `point(t)` evaluates the edge at a parameter from 0 to 1.
- `reverse()` reverses the edge's direction.
- `move_start_point(p)` and `move_end_point(p)` move one end of the edge.
- `clone()` returns a copy.

An edge's `color` is an `EdgeColor` flag. `Contour.reverse()` reverses a whole contour.

## Bitmaps

```python
from sdfshape.bitmap import Bitmap, PixelType, interpolate
from sdfshape.geometry import Vector2

bitmap = Bitmap(4, 4, 3, PixelType.FLOAT)
bitmap.set_pixel(1, 2, (0.25, 0.5, 1.0))
print(bitmap.pixel(1, 2))
print(interpolate(bitmap, Vector2(1.5, 2.5)))
```

Rows are stored bottom-up, in order of increasing y. The bitmap provides:

- `row(y)` returns one row as a flat list.
- `copy()` returns an independent copy.
- `Bitmap.from_pixels(...)` builds a bitmap from a flat sequence of channel values.
- The `data` property exposes the underlying storage array.

## Shape descriptions

A shape can be written as text. Each contour goes inside braces. Points are separated by `;`, and `#` closes the contour back to its first point:

```python
from sdfshape.shape_description import read_shape_description, write_shape_description

shape, colors_specified = read_shape_description("{ 0, 0; 1, 0; (1, 1); 0, 1; # }")
text = write_shape_description(shape)
```

The format has a few more rules:

- Control points go in parentheses. Use one point for a quadratic edge, or two separated by `;` for a cubic edge.
- An optional colour letter (`c`, `m`, `y` or `w`, in either case) in front of an edge sets that edge's colour.
- A leading `@invert-y` marks a shape whose Y axis points down.
- A single contour may also be given without braces.

Text that does not parse raises `ShapeDescriptionError`. Writing a shape that fails `validate()` also raises it. Colour letters are written only when some edge is not white.

`read_shape_file(stream)` reads from an open file, in text or binary mode, and binary input is decoded as UTF-8. `write_shape_file(stream, shape)` writes to an open text file.

## SVG import

```python
from sdfshape.svg_import import parse_svg_path, load_svg_shape, load_svg_geometry

shape = parse_svg_path("M 0 0 L 10 0 L 10 10 Z", 0.0, None)
shape, dimensions = load_svg_shape("glyph.svg", 0)
shape, view_box, flags = load_svg_geometry("glyph.svg")
```

`parse_svg_path` supports the commands M, L, H, V, Q, T, C, S, A and Z, in upper and lower case. Elliptical arcs are approximated with cubic curves. A contour left open is closed in one of two ways:

- If the gap is shorter than `endpoint_snap_range`, the last end point is moved onto the contour's start.
- Otherwise a line is added.

Malformed path data raises `SvgPathError`.

`load_svg_shape(filename, path_index)` reads one `<path>` element, including paths inside `<g>` groups. A positive index counts from the first path, so 1 is the first. Zero or a negative index counts from the last, so 0 and -1 are both the last. It returns the shape together with the document's width and height; a `viewBox` attribute overrides both.

`load_svg_geometry(filename)` reads the last path. It returns the shape, the view box as `Bounds`, and `SvgImportFlags`:

- `INCOMPLETE` means the document also has other paths or `rect`, `circle`, `ellipse` or `polygon` elements that were not read.
- `UNSUPPORTED_FEATURE` means it uses `mask` or `use`.
- `TRANSFORMATION_IGNORED` means the path or one of its groups carries a `transform`, which was not applied.

Shapes loaded from files have `inverse_y_axis` set.

## Saving images

```python
from sdfshape.bitmap import Bitmap, PixelType
from sdfshape.imaging import ImageFormat, YDirection, save_image, encode_png

bitmap = Bitmap(16, 16, 3, PixelType.FLOAT)
save_image(bitmap, ImageFormat.PNG, "out.png", YDirection.BOTTOM_UP)
data = encode_png(bitmap)   # PNG bytes in memory
```

PNG output is 8-bit, written top-down. It needs 1, 3 or 4 channels and a non-empty bitmap. Float values are converted to bytes.

| Pixel type | Formats |
| --- | --- |
| Float bitmaps | `PNG`, `TEXT_FLOAT` (`%g` values), `BINARY_FLOAT` (little-endian 32-bit floats), `BINARY_FLOAT_BE` (big-endian) |
| Byte bitmaps | `PNG`, `TEXT` (two hex digits per value), `BINARY` (raw bytes) |

For text and binary output, `YDirection.TOP_DOWN` writes the rows in reverse storage order.

The writers are also available directly:

- `save_png`
- `save_image_text`
- `save_image_binary`
- `save_image_binary_le`
- `save_image_binary_be`

Asking for a format that does not fit the bitmap's pixel type raises `UnsupportedFormatError`.

## What is not included

The package does not do any of the following:

- Generate distance fields. It has no SDF, pseudo-SDF or multi-channel SDF generators, and no error correction.
- Color edges automatically.
- Load fonts or glyphs.
- Pack atlases.
- Write `BMP` or `TIFF` files. `save_image` raises `UnsupportedFormatError` for these formats.

It also has no command-line program.