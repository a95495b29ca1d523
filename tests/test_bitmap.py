import pytest

from sdfshape.bitmap import Bitmap, PixelType, interpolate
from sdfshape.geometry import Vector2


def test_new_bitmap_is_zeroed():
    bitmap = Bitmap(3, 2, channels=3)
    assert len(bitmap.data) == 3 * 2 * 3
    assert all(value == 0 for value in bitmap.data)
    assert bitmap.pixel(2, 1) == (0.0, 0.0, 0.0)


def test_set_and_get_pixel_round_trip():
    bitmap = Bitmap(4, 4, channels=3)
    bitmap.set_pixel(1, 2, (0.25, 0.5, 0.75))
    assert bitmap.pixel(1, 2) == (0.25, 0.5, 0.75)
    assert bitmap.pixel(2, 1) == (0.0, 0.0, 0.0)


def test_single_channel_accepts_scalar():
    bitmap = Bitmap(2, 2)
    bitmap.set_pixel(0, 1, 0.5)
    assert bitmap.pixel(0, 1) == (0.5,)


def test_layout_is_row_major_with_interleaved_channels():
    bitmap = Bitmap(2, 2, channels=2, pixel_type=PixelType.BYTE)
    bitmap.set_pixel(1, 1, (7, 9))
    assert list(bitmap.data[-2:]) == [7, 9]
    assert bitmap.row(1) == [0, 0, 7, 9]
    assert bitmap.row(0) == [0, 0, 0, 0]


def test_from_pixels_and_row():
    values = [1, 2, 3, 4, 5, 6]
    bitmap = Bitmap.from_pixels(values, 3, 2, pixel_type=PixelType.BYTE)
    assert bitmap.row(0) == values[:3]
    assert bitmap.row(1) == values[3:]
    assert bitmap.pixel(2, 1) == (6,)


def test_from_pixels_rejects_wrong_length():
    with pytest.raises(ValueError):
        Bitmap.from_pixels([0.0] * 5, 3, 2)


def test_byte_values_out_of_range_rejected():
    bitmap = Bitmap(1, 1, pixel_type=PixelType.BYTE)
    with pytest.raises(ValueError):
        bitmap.set_pixel(0, 0, 300)
    with pytest.raises(ValueError):
        Bitmap.from_pixels([-1], 1, 1, pixel_type=PixelType.BYTE)


def test_wrong_channel_count_rejected():
    bitmap = Bitmap(1, 1, channels=3)
    with pytest.raises(ValueError):
        bitmap.set_pixel(0, 0, (0.1, 0.2))


def test_out_of_bounds_access():
    bitmap = Bitmap(2, 3)
    with pytest.raises(IndexError):
        bitmap.pixel(2, 0)
    with pytest.raises(IndexError):
        bitmap.set_pixel(0, 3, 1.0)
    with pytest.raises(IndexError):
        bitmap.row(-1)


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Bitmap(-1, 2)
    with pytest.raises(ValueError):
        Bitmap(2, 2, channels=0)


def test_copy_is_independent():
    original = Bitmap(2, 2, channels=4)
    original.set_pixel(0, 0, (0.5, 0.5, 0.5, 0.5))
    duplicate = original.copy()
    assert duplicate == original
    duplicate.set_pixel(0, 0, (0.0, 0.0, 0.0, 0.0))
    assert original.pixel(0, 0) == (0.5, 0.5, 0.5, 0.5)
    assert duplicate != original


def test_interpolate_at_pixel_centre_returns_pixel():
    bitmap = Bitmap.from_pixels([0.25, 0.5, 0.75, 1.0], 2, 2)
    for x in range(2):
        for y in range(2):
            assert interpolate(bitmap, Vector2(x + 0.5, y + 0.5)) == bitmap.pixel(x, y)


def test_interpolate_midway_between_pixels():
    bitmap = Bitmap.from_pixels([0.0, 1.0], 2, 1)
    assert interpolate(bitmap, Vector2(1.0, 0.5)) == (0.5,)


def test_interpolate_clamps_outside_edges():
    bitmap = Bitmap.from_pixels([0.25, 0.75], 2, 1)
    assert interpolate(bitmap, Vector2(-3.0, 0.5)) == bitmap.pixel(0, 0)
    assert interpolate(bitmap, Vector2(10.0, 5.0)) == bitmap.pixel(1, 0)


def test_interpolate_uniform_bitmap_is_constant():
    bitmap = Bitmap.from_pixels([0.5] * 9, 3, 3)
    for pos in (Vector2(0.1, 2.9), Vector2(1.7, 1.3), Vector2(2.2, 0.6)):
        assert interpolate(bitmap, pos) == (0.5,)


def test_interpolate_byte_bitmap_returns_ints_within_range():
    bitmap = Bitmap.from_pixels([10, 200, 30, 90], 2, 2, pixel_type=PixelType.BYTE)
    for pos in (Vector2(0.8, 0.9), Vector2(1.3, 1.1), Vector2(0.6, 1.4)):
        (value,) = interpolate(bitmap, pos)
        assert isinstance(value, int)
        assert 10 <= value <= 200


def test_interpolate_empty_bitmap_fails():
    with pytest.raises(ValueError):
        interpolate(Bitmap(), Vector2(0.5, 0.5))