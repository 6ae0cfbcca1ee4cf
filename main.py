import argparse
import sys

from qoicodec import QOIDecoder, QOIEncoder, QOIError, load_image, qoi_to_png


def encode_image(src, dst):
    pixel_data, header = load_image(src)
    print(
        f"Loaded image {src}: {header.width}x{header.height} Channels: {header.channels}"
    )
    print(f"Original {src} {pixel_data.nbytes} bytes")

    encoded = QOIEncoder.encode(header, pixel_data.tobytes())

    with open(dst, "wb") as f:
        f.write(encoded)

    print(f"Encoded QOI to {len(encoded)} bytes")


def decode_image(src, dst):
    size = qoi_to_png(src, dst)
    print(f"Converted {src} to {dst} ({size} bytes)")


def show_info(src):
    with open(src, "rb") as f:
        header, pixels = QOIDecoder.decode(f.read())
    print(
        f"{src}: {header.width}x{header.height} Channels: {header.channels} "
        f"Colorspace: {header.colorspace} Raw: {len(pixels)} bytes"
    )


def build_parser():
    parser = argparse.ArgumentParser(description="Convert images to and from QOI.")
    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser("encode", help="image (PNG, JPEG, RAW...) to QOI")
    encode.add_argument("src")
    encode.add_argument("dst")

    decode = commands.add_parser("decode", help="QOI to PNG")
    decode.add_argument("src")
    decode.add_argument("dst")

    info = commands.add_parser("info", help="print the header of a QOI file")
    info.add_argument("src")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        if args.command == "encode":
            encode_image(args.src, args.dst)
        elif args.command == "decode":
            decode_image(args.src, args.dst)
        else:
            show_info(args.src)
    except (QOIError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
