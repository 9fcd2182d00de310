"""Controller wiring with stand-in widgets; skipped where Tk is unavailable."""

from unittest.mock import MagicMock

import pytest

pytest.importorskip("customtkinter")

from pnmkit.controllers.app_controller import AppController  # noqa: E402
from pnmkit.models.bitmap import BitmapImage  # noqa: E402


@pytest.fixture
def controller():
    ctrl = AppController(viewer=MagicMock(), sidebar=MagicMock(), bottom=MagicMock(), window=MagicMock())
    ctrl.viewer.get_zoom_percent.return_value = 100
    ctrl.bind_events()
    return ctrl


@pytest.fixture
def gray_file(tmp_path):
    path = tmp_path / "img.pgm"
    path.write_bytes(b"P2\n2 1\n8\n1 7\n")
    return path


def test_open_path_renders_image(controller, gray_file):
    controller.open_path(str(gray_file))
    controller.viewer.set_image.assert_called_once()
    controller.viewer.set_reference_image.assert_called_once()
    controller.sidebar.set_image_info.assert_called()
    controller.window.title.assert_called_with("pnmkit: img.pgm")


def test_open_bad_file_reports_status(controller, tmp_path):
    bad = tmp_path / "bad.pgm"
    bad.write_bytes(b"P7\n")
    controller.open_path(str(bad))
    controller.viewer.set_image.assert_not_called()
    message = controller.bottom.set_status.call_args[0][0]
    assert message.startswith("Ошибка:")


def test_threshold_operation_uses_sidebar_ratio(controller, gray_file):
    controller.open_path(str(gray_file))
    controller.sidebar.get_use_otsu.return_value = False
    controller.sidebar.get_threshold_ratio.return_value = 0.5
    controller.sidebar.on_operation("to_bitmap")
    image = controller._editor.image
    assert isinstance(image, BitmapImage)
    assert image.to_list() == [[False, True]]


def test_cursor_reports_pixel_value(controller, gray_file):
    controller.open_path(str(gray_file))
    controller.viewer.on_cursor_move(1, 0)
    controller.sidebar.update_cursor_info.assert_called_with(1, 0, 7)
    controller.viewer.on_cursor_move(None, None)
    controller.sidebar.update_cursor_info.assert_called_with(None, None, None)
