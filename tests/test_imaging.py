import struct
import zlib

import pytest

from sdfshape.bitmap import Bitmap, PixelType
from sdfshape.imaging import (
    ImageFormat,
    UnsupportedFormatError,
    YDirection,
    encode_png,
    save_image,
    save_image_binary,
    save_image_binary_be,
    save_image_binary_le,
    save_image_text,
    save_png,
)


def _chunks(data):
    pos = 8
    chunks = []
    while pos < len(data):
        (length,) = struct.unpack(">I", data[pos : pos + 4])
        kind = data[pos + 4 : pos + 8]
        payload = data[pos + 8 : pos + 8 + length]
        (crc,) = struct.unpack(">I", data[pos + 8 + length : pos + 12 + length])
        chunks.append((kind, payload, crc))
        pos += 12 + length
    return chunks


def _byte_bitmap(channels=1):
    values = list(range(10, 10 + 2 * 2 * channels))
    return Bitmap.from_pixels(values, 2, 2, channels, PixelType.BYTE), values


def test_png_signature_and_chunks():
    bitmap, _ = _byte_bitmap()
    data = encode_png(bitmap)
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    kinds = [kind for kind, _, _ in _chunks(data)]
    assert kinds == [b"IHDR", b"IDAT", b"IEND"]


def test_png_crcs_are_valid():
    bitmap, _ = _byte_bitmap(3)
    for kind, payload, crc in _chunks(encode_png(bitmap)):
        assert zlib.crc32(kind + payload) & 0xFFFFFFFF == crc


@pytest.mark.parametrize("channels,color_type", [(1, 0), (3, 2), (4, 6)])
def test_png_header(channels, color_type):
    bitmap, _ = _byte_bitmap(channels)
    header = _chunks(encode_png(bitmap))[0][1]
    width, height, depth, ctype, comp, filt, interlace = struct.unpack(">IIBBBBB", header)
    assert (width, height, depth, ctype) == (2, 2, 8, color_type)
    assert (comp, filt, interlace) == (0, 0, 0)


def test_png_rows_are_top_first():
    bitmap, values = _byte_bitmap()
    raw = zlib.decompress(_chunks(encode_png(bitmap))[1][1])
    assert raw == b"\x00" + bytes(values[2:4]) + b"\x00" + bytes(values[0:2])


def test_png_float_conversion():
    bitmap = Bitmap.from_pixels([0.0, 1.0], 2, 1)
    raw = zlib.decompress(_chunks(encode_png(bitmap))[1][1])
    assert raw == b"\x00\x00\xff"


def test_png_rejects_two_channels():
    bitmap = Bitmap(2, 2, 2)
    with pytest.raises(UnsupportedFormatError):
        encode_png(bitmap)


def test_png_rejects_empty():
    with pytest.raises(ValueError):
        encode_png(Bitmap(0, 0, 1))


def test_save_png_writes_encoded(tmp_path):
    bitmap, _ = _byte_bitmap(4)
    path = tmp_path / "out.png"
    save_png(bitmap, path)
    assert path.read_bytes() == encode_png(bitmap)


def test_binary_bottom_up_and_top_down(tmp_path):
    bitmap, values = _byte_bitmap()
    up = tmp_path / "up.bin"
    down = tmp_path / "down.bin"
    save_image_binary(bitmap, up, YDirection.BOTTOM_UP)
    save_image_binary(bitmap, down, YDirection.TOP_DOWN)
    assert up.read_bytes() == bytes(values)
    assert down.read_bytes() == bytes(values[2:4] + values[0:2])


def test_binary_rejects_float(tmp_path):
    with pytest.raises(UnsupportedFormatError):
        save_image_binary(Bitmap(1, 1), tmp_path / "x.bin", YDirection.BOTTOM_UP)


def test_float_binary_little_and_big_endian(tmp_path):
    values = [0.25, 1.5, -2.0, 3.0]
    bitmap = Bitmap.from_pixels(values, 1, 2, 2)
    le = tmp_path / "le.bin"
    be = tmp_path / "be.bin"
    save_image_binary_le(bitmap, le, YDirection.BOTTOM_UP)
    save_image_binary_be(bitmap, be, YDirection.BOTTOM_UP)
    assert list(struct.unpack("<4f", le.read_bytes())) == values
    assert list(struct.unpack(">4f", be.read_bytes())) == values


def test_float_binary_top_down(tmp_path):
    values = [0.25, 1.5, -2.0, 3.0]
    bitmap = Bitmap.from_pixels(values, 2, 2)
    path = tmp_path / "le.bin"
    save_image_binary_le(bitmap, path, YDirection.TOP_DOWN)
    assert list(struct.unpack("<4f", path.read_bytes())) == [-2.0, 3.0, 0.25, 1.5]


def test_float_binary_rejects_bytes(tmp_path):
    bitmap, _ = _byte_bitmap()
    with pytest.raises(UnsupportedFormatError):
        save_image_binary_be(bitmap, tmp_path / "x.bin", YDirection.BOTTOM_UP)


def test_text_bytes(tmp_path):
    bitmap = Bitmap.from_pixels([0, 255, 10, 171], 2, 2, 1, PixelType.BYTE)
    path = tmp_path / "out.txt"
    save_image_text(bitmap, path, YDirection.TOP_DOWN)
    assert path.read_text() == "0A AB\n00 FF\n"


def test_text_floats(tmp_path):
    bitmap = Bitmap.from_pixels([0.5, 0.25, 1.0], 3, 1)
    path = tmp_path / "out.txt"
    save_image_text(bitmap, path, YDirection.BOTTOM_UP)
    assert path.read_text() == "0.5 0.25 1\n"


def test_save_image_dispatches(tmp_path):
    bitmap = Bitmap.from_pixels([0.5, 0.25], 2, 1)
    direct = tmp_path / "direct.bin"
    via = tmp_path / "via.bin"
    save_image_binary_be(bitmap, direct, YDirection.BOTTOM_UP)
    save_image(bitmap, ImageFormat.BINARY_FLOAT_BE, via)
    assert via.read_bytes() == direct.read_bytes()


def test_save_image_png(tmp_path):
    bitmap, _ = _byte_bitmap()
    path = tmp_path / "img.png"
    save_image(bitmap, ImageFormat.PNG, path, YDirection.BOTTOM_UP)
    assert path.read_bytes() == encode_png(bitmap)


@pytest.mark.parametrize(
    "image_format",
    [ImageFormat.TEXT_FLOAT, ImageFormat.BINARY_FLOAT, ImageFormat.BINARY_FLOAT_BE,
     ImageFormat.TIFF, ImageFormat.UNSPECIFIED],
)
def test_save_image_rejects_for_bytes(tmp_path, image_format):
    bitmap, _ = _byte_bitmap()
    with pytest.raises(UnsupportedFormatError):
        save_image(bitmap, image_format, tmp_path / "x")


@pytest.mark.parametrize("image_format", [ImageFormat.TEXT, ImageFormat.BINARY, ImageFormat.UNSPECIFIED])
def test_save_image_rejects_for_floats(tmp_path, image_format):
    with pytest.raises(UnsupportedFormatError):
        save_image(Bitmap(1, 1), image_format, tmp_path / "x")