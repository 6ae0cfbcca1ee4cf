from .converter import png_to_qoi, qoi_to_png
from .decoder import QOIDecoder, decode
from .encoder import QOIEncoder, encode
from .qoi import (
    QOI,
    BadEndMarker,
    BadMagicNumber,
    Colorspace,
    DecodeError,
    Header,
    InsufficientData,
    InvalidBufferLength,
    InvalidHeader,
    Op,
    Pixel,
    QOIError,
    TrailingData,
)
from .utils import image_from_pixels, load_image

__all__ = [
    "QOIEncoder",
    "QOIDecoder",
    "QOI",
    "encode",
    "decode",
    "Header",
    "Pixel",
    "Colorspace",
    "Op",
    "QOIError",
    "DecodeError",
    "InsufficientData",
    "BadMagicNumber",
    "BadEndMarker",
    "TrailingData",
    "InvalidHeader",
    "InvalidBufferLength",
    "load_image",
    "image_from_pixels",
    "png_to_qoi",
    "qoi_to_png",
]
