import numpy as np
import pytest
from PIL import Image

import comparison
import main
from qoicodec import Header, decode, image_from_pixels, load_image, png_to_qoi, qoi_to_png


def test_load_image_rgb(png_file, rgb_array):
    pixel_data, desc = load_image(png_file)

    assert desc == Header(width=64, height=48, channels=3, colorspace=0)
    assert np.array_equal(pixel_data, rgb_array)


def test_load_image_rgba(rgba_png_file, rgba_array):
    pixel_data, desc = load_image(rgba_png_file)

    assert desc.channels == 4
    assert np.array_equal(pixel_data, rgba_array)


def test_load_image_converts_palette(tmp_path, rgb_array):
    path = tmp_path / "palette.png"
    Image.fromarray(rgb_array).convert("P").save(path)

    pixel_data, desc = load_image(path)

    assert desc.channels == 3
    assert pixel_data.shape == (48, 64, 3)


def test_image_from_pixels():
    img = image_from_pixels(Header(2, 1, 4), bytes([1, 2, 3, 4, 5, 6, 7, 8]))

    assert img.mode == "RGBA"
    assert img.getpixel((1, 0)) == (5, 6, 7, 8)


@pytest.mark.parametrize("fixture", ["png_file", "rgba_png_file"])
def test_png_round_trip(request, tmp_path, fixture):
    src = request.getfixturevalue(fixture)
    qoi_path = tmp_path / "converted.qoi"
    png_path = tmp_path / "reconverted.png"

    written = png_to_qoi(src, qoi_path)
    assert written == qoi_path.stat().st_size

    assert qoi_to_png(qoi_path, png_path) == png_path.stat().st_size
    assert Image.open(src).tobytes() == Image.open(png_path).tobytes(), (
        "Reconverted image does not match original!"
    )


def test_main_encode_and_info(png_file, tmp_path, capsys):
    dst = tmp_path / "out.qoi"

    assert main.main(["encode", str(png_file), str(dst)]) == 0
    header, _ = decode(dst.read_bytes())
    assert (header.width, header.height) == (64, 48)

    assert main.main(["info", str(dst)]) == 0
    assert "64x48 Channels: 3" in capsys.readouterr().out


def test_main_decode(png_file, tmp_path):
    qoi_path = tmp_path / "out.qoi"
    png_to_qoi(png_file, qoi_path)

    assert main.main(["decode", str(qoi_path), str(tmp_path / "out.png")]) == 0


def test_main_reports_bad_file(tmp_path, capsys):
    bogus = tmp_path / "bogus.qoi"
    bogus.write_bytes(bytes(10))

    assert main.main(["info", str(bogus)]) == 1
    assert "Error" in capsys.readouterr().err


def test_find_images(tmp_path, rgb_array):
    (tmp_path / "sub").mkdir()
    (tmp_path / ".hidden").mkdir()
    for name in ("a.png", "sub/b.png", ".hidden/c.png", ".d.png", "e.txt"):
        Image.fromarray(rgb_array).save(tmp_path / name, format="PNG")

    found = [p.replace(str(tmp_path), "") for p in comparison.find_images(tmp_path)]
    assert sorted(found) == sorted(["/a.png", "/sub/b.png"])

    shallow = list(comparison.find_images(tmp_path, recurse=False))
    assert len(shallow) == 1


def test_benchmark(png_file, capsys):
    m = comparison.benchmark_file(str(png_file), iterations=2)

    assert (m.width, m.height, m.raw_size) == (64, 48, 64 * 48 * 3)
    assert len(m.encode_ms) == len(m.decode_ms) == 2
    assert 0 < m.rate < 100

    assert comparison.main(["1", str(png_file.parent), "--format", "html"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<!doctype html>")
    assert "gradient.png" in out
