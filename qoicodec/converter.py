import os

from PIL import Image

from .decoder import QOIDecoder
from .encoder import QOIEncoder
from .qoi import Colorspace, Header
from .utils import image_from_pixels


def png_to_qoi(png_path, qoi_path) -> int:
    img = Image.open(png_path)
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")
    width, height = img.size

    encoded = QOIEncoder.encode(
        Header(
            width=width,
            height=height,
            channels=len(img.getbands()),
            colorspace=Colorspace.SRGB,
        ),
        img.tobytes(),
    )

    with open(qoi_path, "wb") as f:
        f.write(encoded)
    return len(encoded)


def qoi_to_png(qoi_path, png_path) -> int:
    with open(qoi_path, "rb") as f:
        content = f.read()

    header, pixels = QOIDecoder.decode(content)

    img = image_from_pixels(header, pixels)
    img.save(png_path, format="PNG")

    return os.path.getsize(png_path)
