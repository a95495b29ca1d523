"""Vector shapes, shape descriptions, SVG path import, bitmaps and image export for signed distance field work."""

__version__ = "0.1.0"

__all__ = ["geometry", "bitmap", "shape", "shape_description", "svg_import", "imaging"]