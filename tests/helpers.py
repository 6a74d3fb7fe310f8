"""Assertion helpers shared by the tests."""
import struct
import zlib

from PIL import Image as PILImage


def pixel(path):
    """Colour of the centre pixel of an image file."""
    with PILImage.open(path) as im:
        rgb = im.convert("RGB")
        return rgb.getpixel((rgb.width // 2, rgb.height // 2))


def close_to(actual, expected, tol=12):
    """WebP is lossy; compare colours with a tolerance."""
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))


def png_header(width, height) -> bytes:
    """A PNG whose header claims width x height, with no real pixel data."""
    def chunk(kind, data):
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body))

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(b""))
        + chunk(b"IEND", b"")
    )
