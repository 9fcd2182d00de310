"""Command line: info and convert."""

import pytest

from pnmkit import cli
from pnmkit.services import pnm_codec


@pytest.fixture
def gray_file(tmp_path):
    path = tmp_path / "in.pgm"
    path.write_bytes(b"P2\n3 1\n255\n0 100 255\n")
    return path


def test_info_prints_description(gray_file, capsys):
    assert cli.main(["info", str(gray_file)]) == 0
    out = capsys.readouterr().out
    assert "P2 3x1" in out
    assert "max 255" in out


def test_convert_applies_operations_in_order(gray_file, tmp_path):
    out = tmp_path / "out.pbm"
    code = cli.main(["-q", "convert", str(gray_file), str(out), "--invert", "--to-bitmap", "--variant", "binary"])
    assert code == 0
    image = pnm_codec.decode(out.read_bytes())
    assert image.magic_number == "P4"
    # inverted: 255 155 0 -> threshold 127
    assert image.to_list() == [[True, True, False]]


def test_convert_rotate_and_comment(gray_file, tmp_path):
    out = tmp_path / "out.pgm"
    assert cli.main(["convert", str(gray_file), str(out), "--rotate", "270", "--comment", "rotated"]) == 0
    data = out.read_bytes()
    assert data.startswith(b"P2\n# rotated\n1 3\n255\n")
    assert pnm_codec.decode(data).to_list() == [[255], [100], [0]]


def test_convert_reports_errors(tmp_path):
    bad = tmp_path / "bad.pgm"
    bad.write_bytes(b"P9\n")
    assert cli.main(["-q", "convert", str(bad), str(tmp_path / "o.pgm")]) == 1
    assert cli.main(["-q", "info", str(tmp_path / "missing.pgm")]) == 1


def test_convert_rejects_threshold_with_otsu(gray_file, tmp_path):
    args = ["-q", "convert", str(gray_file), str(tmp_path / "o.pbm"), "--to-bitmap", "--otsu", "--threshold", "3"]
    assert cli.main(args) == 1
