import numpy as np
from PIL import Image

from .qoi import Colorspace, Header

RAW_EXTENSIONS = ("dng", "cr2", "nef", "arw", "raw")


def load_image(filepath: str) -> tuple[np.ndarray, Header]:
    """Load an image and return pixel data as numpy array + header."""

    ext = str(filepath).lower().split(".")[-1]

    if ext in RAW_EXTENSIONS:
        # RAW formats - requires rawpy
        import rawpy

        with rawpy.imread(str(filepath)) as raw:
            rgb = raw.postprocess()
        img = Image.fromarray(rgb)
    else:
        # Standard formats (PNG, JPEG, etc.)
        img = Image.open(filepath)

    # Convert to RGB or RGBA
    if img.mode == "RGBA":
        channels = 4
    else:
        img = img.convert("RGB")
        channels = 3

    return np.array(img), Header(
        width=img.size[0],
        height=img.size[1],
        channels=channels,
        colorspace=Colorspace.SRGB,
    )


def image_from_pixels(header: Header, pixels: bytes) -> Image.Image:
    """Wrap decoded pixel data in a Pillow image."""
    return Image.frombytes(header.mode, (header.width, header.height), bytes(pixels))
