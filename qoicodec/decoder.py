import logging

from .qoi import (
    QOI,
    START_PIXEL,
    ZERO_PIXEL,
    BadEndMarker,
    Header,
    InsufficientData,
    InvalidHeader,
    Op,
    Pixel,
    TrailingData,
)

logger = logging.getLogger(__name__)


class QOIDecoder:
    """
    A class to decode QOI (Quite OK Image) files into raw pixel data.
    """

    @staticmethod
    def decode(
        file_data: bytes,
        byte_offset: int = 0,
        byte_length: int = None,
    ) -> tuple[Header, bytes]:
        """
        Decode a QOI file given as a bytes/bytearray object.

        :param file_data: Bytes containing the QOI file.
        :param byte_offset: Offset to the start of the QOI file in file_data.
        :param byte_length: Length of the QOI file in bytes.
        :return: The parsed header and the pixel data (bytes), channel-interleaved,
                 with as many channels as the header declares.
        """

        # --- Handle Slicing ---
        if byte_length is None:
            byte_length = len(file_data) - byte_offset

        data = memoryview(file_data)[byte_offset : byte_offset + byte_length]

        # --- Header Parsing ---
        if len(data) < QOI.QOI_HEADER_SIZE + QOI.QOI_END_MARKER_SIZE:
            raise InsufficientData(
                f"QOI.decode: {len(data)} bytes is too short for header and end marker"
            )

        header = Header.unpack(data)

        if data[-QOI.QOI_END_MARKER_SIZE :] != QOI.QOI_END_MARKER:
            raise BadEndMarker("QOI.decode: The end marker of the QOI file is invalid")

        # --- Validation ---
        if header.channels not in (3, 4):
            raise InvalidHeader(
                "QOI.decode: The number of channels declared in the file is invalid"
            )

        total_pixels = header.pixel_count
        if total_pixels > QOI.QOI_PIXELS_MAX:
            raise InvalidHeader(
                f"QOI.decode: {header.width}x{header.height} exceeds the pixel limit"
            )

        # Each chunk byte describes at most QOI_RUN_MAX pixels
        chunks_length = len(data) - QOI.QOI_END_MARKER_SIZE
        if (chunks_length - QOI.QOI_HEADER_SIZE) * QOI.QOI_RUN_MAX < total_pixels:
            raise InsufficientData(
                f"QOI.decode: Not enough data for {header.width}x{header.height} pixels"
            )

        logger.debug(
            "decoding %dx%d image, %d channels, colorspace %d",
            header.width,
            header.height,
            header.channels,
            header.colorspace,
        )

        # --- Initialization ---
        channels = header.channels
        result = bytearray(header.pixel_length)

        # Index array: 64 pixels, initialized to (0, 0, 0, 0)
        index = [ZERO_PIXEL] * QOI.QOI_INDEX_SIZE

        r, g, b, a = START_PIXEL

        read_pos = QOI.QOI_HEADER_SIZE
        write_pos = 0
        run = 0

        # --- Decoding Loop ---
        for _ in range(total_pixels):

            # 1. Handle Run-Length Decoding
            if run > 0:
                run -= 1

            # 2. Read Next Op-Code
            else:
                if read_pos >= chunks_length:
                    raise InsufficientData(
                        f"QOI.decode: Chunk stream ended after {write_pos // channels}"
                        f" of {total_pixels} pixels"
                    )
                tag = data[read_pos]
                read_pos += 1
                op = Op.of(tag)

                if op is Op.RGB or op is Op.RGBA or op is Op.LUMA:
                    payload = 3 if op is Op.RGB else 4 if op is Op.RGBA else 1
                    if read_pos + payload > chunks_length:
                        raise InsufficientData(
                            f"QOI.decode: Truncated {op.name} chunk at byte {read_pos - 1}"
                        )

                if op is Op.RGB:
                    r, g, b = data[read_pos : read_pos + 3]
                    read_pos += 3

                elif op is Op.RGBA:
                    r, g, b, a = data[read_pos : read_pos + 4]
                    read_pos += 4

                elif op is Op.INDEX:
                    r, g, b, a = index[tag & 0x3F]

                elif op is Op.DIFF:
                    # Extract 2-bit differences and subtract bias of 2
                    r = (r + ((tag >> 4) & 0x03) - 2) & 0xFF
                    g = (g + ((tag >> 2) & 0x03) - 2) & 0xFF
                    b = (b + (tag & 0x03) - 2) & 0xFF

                elif op is Op.LUMA:
                    b2 = data[read_pos]
                    read_pos += 1

                    dg = (tag & 0x3F) - 32
                    r = (r + dg - 8 + ((b2 >> 4) & 0x0F)) & 0xFF
                    g = (g + dg) & 0xFF
                    b = (b + dg - 8 + (b2 & 0x0F)) & 0xFF

                elif op is Op.RUN:
                    # The current pixel is emitted below; run counts the repeats after it
                    run = tag & 0x3F

                # 3. Update Index, also refreshing the slot an INDEX chunk read from
                index[QOI._hash(r, g, b, a)] = Pixel(r, g, b, a)

            # 4. Write Pixel to Result
            result[write_pos] = r
            result[write_pos + 1] = g
            result[write_pos + 2] = b
            if channels == 4:
                result[write_pos + 3] = a
            write_pos += channels

        if read_pos != chunks_length:
            raise TrailingData(
                f"QOI.decode: {chunks_length - read_pos} chunk bytes left after the last pixel"
            )

        return header, bytes(result)


decode = QOIDecoder.decode


# Example Usage
if __name__ == "__main__":
    # A minimal valid QOI file: 2x1 px, black
    # Header: qoif, w=2, h=1, c=3, s=0
    # Data: QOI_OP_RGB(0, 0, 0) then QOI_OP_RUN(0) [one repeat]
    dummy_qoi = (
        b"qoif"
        + b"\x00\x00\x00\x02"  # Width 2
        + b"\x00\x00\x00\x01"  # Height 1
        + b"\x03\x00"  # Channels 3, Space 0
        + b"\xfe\x00\x00\x00"  # OP_RGB
        + b"\xc0"  # OP_RUN (run of 1)
        + QOI.QOI_END_MARKER
    )

    header, pixels = QOIDecoder.decode(dummy_qoi)
    print(f"Decoded: Width={header.width}, Height={header.height}")
    print(f"Pixel Data (Hex): {pixels.hex()}")
