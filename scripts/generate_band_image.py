#!/usr/bin/env python3
"""Generate a synthetic grayscale PNG made of horizontal intensity bands."""
from __future__ import annotations

import argparse
import struct
import zlib
from pathlib import Path


def band_rows(width: int, height: int, levels: list[int]) -> list[bytes]:
    band_height = max(1, height // len(levels))
    rows = []
    for y in range(height):
        level = levels[min(y // band_height, len(levels) - 1)]
        rows.append(bytes([level]) * width)
    return rows


def build_gray_png(width: int, height: int, levels: list[int]) -> bytes:
    raw = b"".join(b"\x00" + row for row in band_rows(width, height, levels))
    compressed = zlib.compress(raw)

    def chunk(chunk_type: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + chunk_type
            + data
            + struct.pack(">I", zlib.crc32(chunk_type + data) & 0xFFFFFFFF)
        )

    # Bit depth 8, colour type 0 (grayscale).
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 0, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", compressed) + chunk(
        b"IEND", b""
    )


def write_image(path: Path, data: bytes, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(f"{path} already exists. Use --overwrite to replace.")
    path.write_bytes(data)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a banded grayscale test image.")
    parser.add_argument("--output", type=Path, default=Path("bands.png"), help="PNG file to write.")
    parser.add_argument("--width", type=int, default=64)
    parser.add_argument("--height", type=int, default=64)
    parser.add_argument(
        "--levels",
        type=int,
        nargs="+",
        default=[30, 200, 90, 240],
        help="Intensity of each band from top to bottom (0-255).",
    )
    parser.add_argument("--overwrite", action="store_true", help="Overwrite an existing file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.width <= 0 or args.height <= 0:
        raise SystemExit("width and height must be positive")
    if any(not 0 <= level <= 255 for level in args.levels):
        raise SystemExit("levels must be within 0-255")
    args.output.parent.mkdir(parents=True, exist_ok=True)
    write_image(args.output, build_gray_png(args.width, args.height, args.levels), args.overwrite)
    print(f"Generated band image {args.output} ({args.width}x{args.height}, {len(args.levels)} bands)")


if __name__ == "__main__":
    main()
