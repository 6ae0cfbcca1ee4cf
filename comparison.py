#! Our QOI is pure Python while Pillow's PNG codec is C, so absolute timings are not comparable to PNG.
#! Sizes are the useful part: QOI against the raw pixels, next to the PNG of the same image.

import argparse
import datetime
import os
import sys
import time
from dataclasses import dataclass, field

import tabulate

from qoicodec import QOIDecoder, QOIEncoder, QOIError, load_image

columns = [
    "image",
    "size",
    "decode ms",
    "encode ms",
    "png kb",
    "qoi kb",
    "raw kb",
    "rate",
]


@dataclass
class Measurements:
    image_path: str
    decode_ms: list = field(default_factory=list)
    encode_ms: list = field(default_factory=list)
    png_size: int = 0
    qoi_size: int = 0
    raw_size: int = 0
    width: int = 0
    height: int = 0

    @property
    def rate(self) -> float:
        return self.qoi_size / self.raw_size * 100.0 if self.raw_size else 0.0


def mean(values):
    return sum(values) / len(values) if values else 0.0


def find_images(directory, recurse=True):
    """Yield every .png below directory, skipping hidden files and directories."""
    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        for name in sorted(files):
            if not name.startswith(".") and name.lower().endswith(".png"):
                yield os.path.join(root, name)
        if not recurse:
            break


def benchmark_file(png_path, iterations):
    m = Measurements(image_path=png_path)
    m.png_size = os.path.getsize(png_path)

    pixel_data, desc = load_image(png_path)
    raw = pixel_data.tobytes()
    m.width, m.height, m.raw_size = desc.width, desc.height, len(raw)

    encoded = QOIEncoder.encode(desc, raw)
    for _ in range(iterations):
        start_time = time.perf_counter()
        encoded = QOIEncoder.encode(desc, raw)
        m.encode_ms.append((time.perf_counter() - start_time) * 1000)

    for _ in range(iterations):
        start_time = time.perf_counter()
        QOIDecoder.decode(encoded)
        m.decode_ms.append((time.perf_counter() - start_time) * 1000)

    m.qoi_size = len(encoded)
    return m


def report(results, tablefmt="plain"):
    rows = [
        [
            m.image_path,
            f"{m.width}x{m.height}",
            mean(m.decode_ms),
            mean(m.encode_ms),
            m.png_size // 1024,
            m.qoi_size // 1024,
            m.raw_size // 1024,
            f"{m.rate:.1f}%",
        ]
        for m in results
    ]
    table = tabulate.tabulate(rows, headers=columns, floatfmt=".1f", tablefmt=tablefmt)
    date = datetime.date.today().strftime("%d/%m/%Y")
    if tablefmt == "html":
        return (
            "<!doctype html>\n<html><head><style>table { border: 1px solid #000; }"
            "</style></head><body>\n<h1>QOI benchmarks</h1>\n"
            f"<p>Date: {date}</p>\n{table}\n</body></html>"
        )
    return f"QOI benchmarks, {date}\n{table}"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark the QOI codec on PNG images.")
    parser.add_argument("iterations", type=int, help="number of iterations to run")
    parser.add_argument("directory", help="directory with benchmark images")
    parser.add_argument(
        "--no-recurse",
        dest="recurse",
        action="store_false",
        help="don't descend into directories",
    )
    parser.add_argument("--format", choices=("plain", "html"), default="plain")
    args = parser.parse_args(argv)

    results = []
    for png_path in find_images(args.directory, args.recurse):
        try:
            results.append(benchmark_file(png_path, args.iterations))
        except (QOIError, OSError) as e:
            print(f"Skipping {png_path}: {e}", file=sys.stderr)

    print(report(results, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
