import numpy as np
import pytest
from PIL import Image

from qoicodec import QOI, Header


def qoi_stream(header: Header, chunks: bytes) -> bytes:
    """Wrap raw chunk bytes in a header and end marker."""
    return header.pack() + bytes(chunks) + QOI.QOI_END_MARKER


@pytest.fixture
def rgb_array():
    """Gradients (DIFF/LUMA/RGB), a long flat band (RUN/INDEX) and a noisy band."""
    rng = np.random.default_rng(1234)
    y, x = np.mgrid[0:48, 0:64]
    img = np.stack([(x * 4) % 256, (y * 5) % 256, ((x + y) * 3) % 256], axis=-1)
    img = img.astype(np.uint8)
    img[10:20, :] = (12, 200, 7)
    img[30:38] = rng.integers(0, 256, size=(8, 64, 3), dtype=np.uint8)
    return img


@pytest.fixture
def rgba_array(rgb_array):
    alpha = np.full(rgb_array.shape[:2] + (1,), 255, dtype=np.uint8)
    alpha[:, 16:24] = 128
    alpha[40:, :] = 0
    return np.concatenate([rgb_array, alpha], axis=-1)


@pytest.fixture
def png_file(tmp_path, rgb_array):
    path = tmp_path / "gradient.png"
    Image.fromarray(rgb_array).save(path)
    return path


@pytest.fixture
def rgba_png_file(tmp_path, rgba_array):
    path = tmp_path / "gradient_alpha.png"
    Image.fromarray(rgba_array).save(path)
    return path
