"""Tests for the in-memory bitmap model: pixel access and transforms."""

import numpy as np
import pytest

from pnmkit import decode
from pnmkit.exceptions import IncompatibleVariantError, InvalidDimensionsError
from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.raster import Variant


@pytest.fixture
def diagonal():
    return BitmapImage(2, 2, pixels=[[True, False], [False, True]])


def test_example_decode_then_invert():
    image = decode(b"P1\n2 2\n1 0\n0 1\n")
    assert isinstance(image, BitmapImage)
    assert image.to_list() == [[True, False], [False, True]]
    image.invert()
    assert image.to_list() == [[False, True], [True, False]]


def test_new_image_is_all_white():
    image = BitmapImage(3, 2)
    assert image.size == (3, 2)
    assert image.pixels.shape == (2, 3)
    assert not image.pixels.any()


def test_out_of_bounds_reads_are_false(diagonal):
    assert diagonal.at(-1, 0) is False
    assert diagonal.at(diagonal.width, 0) is False
    assert diagonal.at(0, -1) is False
    assert diagonal.at(0, diagonal.height) is False
    assert diagonal.at(0, 0) is True


def test_out_of_bounds_writes_are_ignored(diagonal):
    before = diagonal.copy()
    diagonal.set(-1, 0, True)
    diagonal.set(2, 1, True)
    diagonal.set(0, 5, False)
    assert diagonal == before


def test_set_and_at_use_column_then_row():
    image = BitmapImage(3, 2)
    image.set(2, 1, True)
    assert image.at(2, 1) is True
    assert image.to_list() == [[False, False, False], [False, False, True]]


def test_invert_twice_restores(diagonal):
    original = diagonal.copy()
    diagonal.invert()
    assert diagonal != original
    diagonal.invert()
    assert diagonal == original


def test_flip_mirrors_columns():
    image = BitmapImage(3, 1, pixels=[[True, True, False]])
    image.flip()
    assert image.to_list() == [[False, True, True]]
    image.flip()
    assert image.to_list() == [[True, True, False]]


def test_flop_mirrors_rows():
    image = BitmapImage(1, 3, pixels=[[True], [False], [False]])
    image.flop()
    assert image.to_list() == [[False], [False], [True]]


def test_rotate90cw_maps_pixels_and_swaps_dimensions():
    image = BitmapImage(3, 2, pixels=[[1, 0, 0], [0, 0, 1]])
    image.rotate90cw()
    assert (image.width, image.height) == (2, 3)
    # input (i, j) lands at (j, height-1-i)
    assert image.to_list() == [[False, True], [False, False], [True, False]]


def test_rotate_four_times_is_identity():
    rng = np.random.default_rng(7)
    image = BitmapImage(5, 3, pixels=rng.integers(0, 2, size=(3, 5)).astype(bool))
    original = image.copy()
    for _ in range(4):
        image.rotate90cw()
    assert image == original


def test_set_variant_switches_magic(diagonal):
    assert diagonal.magic_number == "P1"
    diagonal.set_variant(Variant.BINARY)
    assert diagonal.magic_number == "P4"
    diagonal.set_variant("P1")
    assert diagonal.variant is Variant.ASCII
    diagonal.set_variant("binary")
    assert diagonal.magic_number == "P4"


@pytest.mark.parametrize("target", ["P2", "P5", "P9", "color"])
def test_set_variant_rejects_other_depth(diagonal, target):
    with pytest.raises(IncompatibleVariantError):
        diagonal.set_variant(target)
    assert diagonal.magic_number == "P1"


@pytest.mark.parametrize("width, height", [(0, 2), (2, -1), (1.5, 2), (True, 2)])
def test_invalid_dimensions_rejected(width, height):
    with pytest.raises(InvalidDimensionsError):
        BitmapImage(width, height)


def test_grid_shape_must_match():
    with pytest.raises(InvalidDimensionsError):
        BitmapImage(2, 2, pixels=[[True, False, True], [False, True, False]])
    with pytest.raises(InvalidDimensionsError):
        BitmapImage(2, 2, pixels=[[True, False], [False]])


def test_copy_is_independent(diagonal):
    clone = diagonal.copy()
    clone.set(0, 0, False)
    assert diagonal.at(0, 0) is True


def test_pixels_property_returns_copy(diagonal):
    grid = diagonal.pixels
    grid[0, 0] = False
    assert diagonal.at(0, 0) is True


def test_equality_includes_variant(diagonal):
    other = diagonal.copy()
    other.set_variant("P4")
    assert diagonal != other
