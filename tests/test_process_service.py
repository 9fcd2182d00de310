"""Pillow interop and thresholding helpers."""

import numpy as np
import pytest
from PIL import Image

from pnmkit.models.bitmap import BitmapImage
from pnmkit.models.grayscale import GrayscaleImage
from pnmkit.services.process_service import ProcessService


@pytest.fixture
def service():
    return ProcessService()


def test_to_pil_bitmap_black_is_zero(service):
    pil = service.to_pil(BitmapImage(2, 1, pixels=[[True, False]]))
    assert pil.mode == "L"
    assert pil.size == (2, 1)
    assert np.asarray(pil).tolist() == [[0, 255]]


def test_to_pil_scales_grayscale_to_full_range(service):
    pil = service.to_pil(GrayscaleImage(3, 1, max_value=15, pixels=[[0, 15, 5]]))
    assert np.asarray(pil).tolist() == [[0, 255, 85]]


def test_from_pil_converts_and_rescales(service):
    rgb = Image.new("RGB", (3, 2), color=(200, 200, 200))
    image = service.from_pil(rgb)
    assert image.size == (3, 2)
    assert image.max_value == 255
    assert image.pixels.min() == image.pixels.max() == 200

    small = service.from_pil(Image.new("L", (1, 1), color=200), max_value=15)
    assert small.to_list() == [[12]]


def test_otsu_splits_bimodal_image(service):
    grid = np.array([[10, 10, 200, 200], [10, 10, 200, 200]])
    image = GrayscaleImage(4, 2, max_value=255, pixels=grid)
    threshold = service.otsu_threshold(image)
    assert 10 < threshold <= 200
    bitmap = service.binarize(image, "otsu")
    assert np.array_equal(bitmap.pixels, grid == 200)


def test_binarize_methods(service):
    image = GrayscaleImage(3, 1, max_value=10, pixels=[[4, 5, 9]])
    assert service.binarize(image).to_list() == [[False, True, True]]
    assert service.binarize(image, 9).to_list() == [[False, False, True]]
    with pytest.raises(ValueError):
        service.binarize(image, "mystery")
