"""Tests for the grayscale model: value transforms, max value and conversion."""

import numpy as np
import pytest

from pnmkit.exceptions import (
    IncompatibleVariantError,
    InvalidMaxValueError,
    PixelExceedsMaxValueError,
)
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.models.raster import Variant


@pytest.fixture
def ramp():
    return GrayscaleImage(3, 2, max_value=255, pixels=[[0, 128, 255], [10, 20, 30]])


def test_invert_uses_max_value():
    image = GrayscaleImage(3, 1, max_value=15, pixels=[[0, 5, 15]])
    image.invert()
    assert image.to_list() == [[15, 10, 0]]


def test_invert_twice_restores(ramp):
    original = ramp.copy()
    ramp.invert()
    ramp.invert()
    assert ramp == original


def test_flip_twice_restores(ramp):
    original = ramp.copy()
    ramp.flip()
    assert ramp.to_list() == [[255, 128, 0], [30, 20, 10]]
    ramp.flip()
    assert ramp == original


def test_rotate90cw(ramp):
    ramp.rotate90cw()
    assert ramp.size == (2, 3)
    assert ramp.to_list() == [[10, 0], [20, 128], [30, 255]]
    for _ in range(3):
        ramp.rotate90cw()
    assert ramp.to_list() == [[0, 128, 255], [10, 20, 30]]


def test_out_of_bounds_access(ramp):
    assert ramp.at(-1, 0) == 0
    assert ramp.at(ramp.width, 0) == 0
    ramp.set(3, 0, 99)
    assert ramp.to_list()[0] == [0, 128, 255]


def test_set_clamps_into_range():
    image = GrayscaleImage(2, 1, max_value=100)
    image.set(0, 0, 300)
    image.set(1, 0, -5)
    assert image.to_list() == [[100, 0]]


def test_constructor_rejects_pixels_over_max():
    with pytest.raises(PixelExceedsMaxValueError) as info:
        GrayscaleImage(2, 2, max_value=10, pixels=[[0, 1], [11, 2]])
    assert (info.value.row, info.value.column) == (1, 0)


@pytest.mark.parametrize("max_value", [0, 256, -1, 2.5])
def test_constructor_rejects_bad_max_value(max_value):
    with pytest.raises(InvalidMaxValueError):
        GrayscaleImage(1, 1, max_value=max_value)


def test_set_max_value_rescales_proportionally(ramp):
    ramp.set_max_value(15)
    assert ramp.max_value == 15
    # round(v * 15 / 255), halves rounded up
    assert ramp.to_list() == [[0, 8, 15], [1, 1, 2]]
    assert int(ramp.pixels.max()) <= 15


def test_set_max_value_upwards_keeps_proportions():
    image = GrayscaleImage(2, 1, max_value=1, pixels=[[0, 1]])
    image.set_max_value(255)
    assert image.to_list() == [[0, 255]]


@pytest.mark.parametrize("new_max", [0, 300])
def test_set_max_value_rejects_out_of_range(ramp, new_max):
    with pytest.raises(InvalidMaxValueError):
        ramp.set_max_value(new_max)
    assert ramp.max_value == 255


def test_to_bitmap_all_zero_is_all_white():
    bitmap = GrayscaleImage(4, 3, max_value=255).to_bitmap()
    assert isinstance(bitmap, BitmapImage)
    assert bitmap.size == (4, 3)
    assert not bitmap.pixels.any()


def test_to_bitmap_all_max_is_all_black():
    image = GrayscaleImage(4, 3, max_value=200, pixels=np.full((3, 4), 200))
    assert image.to_bitmap().pixels.all()


def test_to_bitmap_checkerboard():
    board = (np.indices((4, 5)).sum(axis=0) % 2) * 255
    bitmap = GrayscaleImage(5, 4, max_value=255, pixels=board).to_bitmap()
    assert np.array_equal(bitmap.pixels, board == 255)


def test_to_bitmap_threshold_is_half_max_rounded_down():
    image = GrayscaleImage(3, 1, max_value=255, pixels=[[126, 127, 128]])
    assert image.to_bitmap().to_list() == [[False, True, True]]
    assert image.to_bitmap(threshold=128).to_list() == [[False, False, True]]


def test_to_bitmap_keeps_encoding():
    image = GrayscaleImage(1, 1, variant=Variant.BINARY)
    assert image.to_bitmap().magic_number == "P4"
    image.set_variant("P2")
    assert image.to_bitmap().magic_number == "P1"


def test_set_variant_rejects_bitmap_magic(ramp):
    with pytest.raises(IncompatibleVariantError):
        ramp.set_variant("P1")
    assert ramp.magic_number == "P2"
    ramp.set_variant("P5")
    assert ramp.magic_number == "P5"


def test_equality_includes_max_value():
    a = GrayscaleImage(1, 1, max_value=10)
    b = GrayscaleImage(1, 1, max_value=11)
    assert a != b
    assert a == GrayscaleImage(1, 1, max_value=10)


def test_histogram_counts_each_level():
    image = GrayscaleImage(3, 1, max_value=3, pixels=[[0, 3, 3]])
    assert image.histogram().tolist() == [1, 0, 0, 2]


def test_to_bitmap_with_max_value_one_marks_every_pixel_black():
    image = GrayscaleImage(3, 1, max_value=1)
    assert image.to_bitmap().pixels.all()
    assert not image.to_bitmap(threshold=1).pixels.any()
