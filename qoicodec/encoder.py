import logging

from .qoi import QOI, START_PIXEL, ZERO_PIXEL, Header, InvalidBufferLength, Pixel

logger = logging.getLogger(__name__)


class QOIEncoder:
    @staticmethod
    def encode(header: Header, color_data) -> bytes:
        """
        Encode a QOI file.

        :param header: Header describing width, height, channels and colorspace.
        :param color_data: Bytes-like object (bytes, bytearray, contiguous uint8
                           array, list of ints) containing pixel data.
        :return: bytes object containing the QOI file content.
        """
        # --- Validation ---
        header.validate("encode")

        if not isinstance(color_data, (bytes, bytearray)):
            color_data = bytes(color_data)

        channels = header.channels
        pixel_length = header.pixel_length
        if len(color_data) != pixel_length:
            raise InvalidBufferLength(
                f"QOI.encode: The length of colorData is incorrect, "
                f"expected {pixel_length} bytes, got {len(color_data)}"
            )

        logger.debug(
            "encoding %dx%d image, %d channels", header.width, header.height, channels
        )

        # --- Initialization ---
        result = bytearray(header.pack())

        # Encoding State
        px_prev = START_PIXEL
        run = 0

        # Index array: 64 pixels, initialized to zero.
        index = [ZERO_PIXEL] * QOI.QOI_INDEX_SIZE

        last_pos = pixel_length - channels

        # --- Pixel Loop ---
        for i in range(0, pixel_length, channels):
            # Alpha stays opaque for 3-channel images
            if channels == 4:
                px = Pixel(*color_data[i : i + 4])
            else:
                px = Pixel(*color_data[i : i + 3])

            # Check for run
            if px == px_prev:
                run += 1
                # If we hit max run length (62) or it's the very last pixel
                if run == QOI.QOI_RUN_MAX or i == last_pos:
                    result.append(QOI.QOI_OP_RUN | (run - 1))
                    run = 0
                continue

            # If we were in a run, end it before processing the new pixel
            if run > 0:
                result.append(QOI.QOI_OP_RUN | (run - 1))
                run = 0

            r, g, b, a = px
            index_pos = px.index_position()

            if index[index_pos] == px:
                result.append(QOI.QOI_OP_INDEX | index_pos)

            else:
                index[index_pos] = px

                if a == px_prev.a:
                    # Byte-wrapped difference (0-255) shifted to -128..127
                    vr = ((r - px_prev.r + 128) & 0xFF) - 128
                    vg = ((g - px_prev.g + 128) & 0xFF) - 128
                    vb = ((b - px_prev.b + 128) & 0xFF) - 128

                    vg_r = vr - vg
                    vg_b = vb - vg

                    if -2 <= vr <= 1 and -2 <= vg <= 1 and -2 <= vb <= 1:
                        result.append(
                            QOI.QOI_OP_DIFF
                            | ((vr + 2) << 4)
                            | ((vg + 2) << 2)
                            | (vb + 2)
                        )

                    elif -8 <= vg_r <= 7 and -32 <= vg <= 31 and -8 <= vg_b <= 7:
                        result.append(QOI.QOI_OP_LUMA | (vg + 32))
                        result.append(((vg_r + 8) << 4) | (vg_b + 8))

                    else:
                        result.append(QOI.QOI_OP_RGB)
                        result.extend((r, g, b))

                else:
                    result.append(QOI.QOI_OP_RGBA)
                    result.extend((r, g, b, a))

            px_prev = px

        # --- End Marker ---
        result.extend(QOI.QOI_END_MARKER)

        return bytes(result)


encode = QOIEncoder.encode


# Example Usage
if __name__ == "__main__":
    # Create a small 2x2 test image (Red, Green, Blue, White)
    pixel_data = [255, 0, 0, 0, 255, 0, 0, 0, 255, 255, 255, 255]

    encoded_qoi = QOIEncoder.encode(Header(width=2, height=2, channels=3), pixel_data)
    print(f"Success! Encoded size: {len(encoded_qoi)} bytes")
    print(f"Hex output: {encoded_qoi.hex()}")
