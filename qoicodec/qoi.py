import enum
import struct
from dataclasses import dataclass
from typing import NamedTuple


class QOI:
    # QOI Constants
    QOI_OP_INDEX = 0x00
    QOI_OP_DIFF  = 0x40
    QOI_OP_LUMA  = 0x80
    QOI_OP_RUN   = 0xC0
    QOI_OP_RGB   = 0xFE
    QOI_OP_RGBA  = 0xFF

    QOI_MASK_2   = 0xC0
    QOI_HEADER_SIZE = 14
    QOI_MAGIC = b'qoif'
    QOI_END_MARKER = b'\x00' * 7 + b'\x01'
    QOI_END_MARKER_SIZE = 8
    QOI_INDEX_SIZE = 64
    QOI_RUN_MAX = 62
    QOI_PIXELS_MAX = 400000000  # Safety limit (400MP)

    # Magic(4), Width(4), Height(4), Channels(1), Colorspace(1)
    HEADER_STRUCT = struct.Struct(">4sIIBB")

    @staticmethod
    def _hash(r, g, b, a):
        """Calculates the index position for the color array."""
        return (r * 3 + g * 5 + b * 7 + a * 11) % 64


class Op(enum.Enum):
    """Kind of chunk selected by a tag byte."""

    INDEX = QOI.QOI_OP_INDEX
    DIFF = QOI.QOI_OP_DIFF
    LUMA = QOI.QOI_OP_LUMA
    RUN = QOI.QOI_OP_RUN
    RGB = QOI.QOI_OP_RGB
    RGBA = QOI.QOI_OP_RGBA

    @classmethod
    def of(cls, tag: int) -> "Op":
        # The 8-bit tags take precedence over the 2-bit ones they overlap with
        if tag == QOI.QOI_OP_RGB:
            return cls.RGB
        if tag == QOI.QOI_OP_RGBA:
            return cls.RGBA
        return _SHORT_OPS[tag & QOI.QOI_MASK_2]


_SHORT_OPS = {op.value: op for op in (Op.INDEX, Op.DIFF, Op.LUMA, Op.RUN)}


class Colorspace(enum.IntEnum):
    """Well-known values of the header colorspace byte.

    Any other byte value is carried through unchanged.
    """

    SRGB = 0
    LINEAR = 1


class Pixel(NamedTuple):
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def index_position(self) -> int:
        return QOI._hash(self.r, self.g, self.b, self.a)


# Starting "previous pixel" for both directions, and the cache fill value
START_PIXEL = Pixel(0, 0, 0, 255)
ZERO_PIXEL = Pixel(0, 0, 0, 0)


class QOIError(ValueError):
    """Base class for every error raised by the codec."""


class DecodeError(QOIError):
    pass


class InsufficientData(DecodeError):
    pass


class BadMagicNumber(DecodeError):
    pass


class BadEndMarker(DecodeError):
    pass


class TrailingData(DecodeError):
    pass


class InvalidHeader(QOIError):
    pass


class InvalidBufferLength(QOIError):
    pass


@dataclass(frozen=True)
class Header:
    """Image description stored in the first 14 bytes of a QOI stream.

    :param width: image width in pixels.
    :param height: image height in pixels.
    :param channels: 3 (RGB) or 4 (RGBA).
    :param colorspace: 0 (sRGB with linear alpha), 1 (all channels linear);
                       other byte values are passed through as-is.
    """

    width: int
    height: int
    channels: int
    colorspace: int = Colorspace.SRGB

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def pixel_length(self) -> int:
        return self.width * self.height * self.channels

    @property
    def mode(self) -> str:
        """Pillow image mode matching the channel count."""
        return "RGBA" if self.channels == 4 else "RGB"

    def validate(self, operation: str) -> None:
        if not (0 <= self.width < 4294967296):
            raise InvalidHeader(f"QOI.{operation}: Invalid width {self.width}")

        if not (0 <= self.height < 4294967296):
            raise InvalidHeader(f"QOI.{operation}: Invalid height {self.height}")

        if self.channels not in (3, 4):
            raise InvalidHeader(
                f"QOI.{operation}: Invalid channels {self.channels}, must be 3 or 4"
            )

        if not (0 <= self.colorspace <= 255):
            raise InvalidHeader(
                f"QOI.{operation}: Invalid colorspace {self.colorspace}, must fit in a byte"
            )

    def pack(self) -> bytes:
        return QOI.HEADER_STRUCT.pack(
            QOI.QOI_MAGIC, self.width, self.height, self.channels, self.colorspace
        )

    @classmethod
    def unpack(cls, data) -> "Header":
        """Parse the header at the start of ``data``; the magic must match."""
        if len(data) < QOI.QOI_HEADER_SIZE:
            raise InsufficientData("QOI.decode: File too short for header")

        magic, width, height, channels, colorspace = QOI.HEADER_STRUCT.unpack_from(data)

        if magic != QOI.QOI_MAGIC:
            raise BadMagicNumber(
                f"QOI.decode: The signature of the QOI file is invalid ({magic!r})"
            )

        return cls(width, height, channels, colorspace)
