"""Captured screen frames and the utilities that operate on them."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field, replace
from os import PathLike
from pathlib import Path
from typing import Iterator, Union

HASH_BITS = 64
_HASH_SIZE = 8
_HASH_MASK = (1 << HASH_BITS) - 1


@dataclass
class CaptureFrame:
    """A captured image stored as packed pixels, row after row."""

    data: bytes = b""
    width: int = 0
    height: int = 0
    bytes_per_pixel: int = 4
    timestamp: _dt.datetime = field(default_factory=_dt.datetime.now)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)

    def data_size(self) -> int:
        """Number of bytes the pixel data occupies for the frame's dimensions."""
        return self.width * self.height * self.bytes_per_pixel

    def is_valid(self) -> bool:
        """True when the frame has positive dimensions and enough pixel data."""
        return (
            self.width > 0
            and self.height > 0
            and self.bytes_per_pixel > 0
            and len(self.data) >= self.data_size()
        )


def _pixels(frame: CaptureFrame) -> Iterator[bytes]:
    bpp = frame.bytes_per_pixel
    for offset in range(0, frame.width * frame.height * bpp, bpp):
        yield frame.data[offset:offset + bpp]


def _luminance(r: int, g: int, b: int) -> int:
    return int(0.299 * r + 0.587 * g + 0.114 * b)


def calculate_hash(frame: CaptureFrame) -> int:
    """Compute a 64-bit difference hash (dHash) of a colour frame.

    Returns 0 for invalid frames and frames with fewer than three channels.
    """
    if not frame.is_valid() or frame.bytes_per_pixel < 3:
        return 0

    scaled = _HASH_SIZE + 1
    bpp = frame.bytes_per_pixel
    rows = []
    for y in range(scaled):
        src_y = min((y * frame.height) // scaled, frame.height - 1)
        row = []
        for x in range(scaled):
            src_x = min((x * frame.width) // scaled, frame.width - 1)
            index = (src_y * frame.width + src_x) * bpp
            r, g, b = frame.data[index:index + 3]
            row.append(_luminance(r, g, b))
        rows.append(row)

    result = 0
    for y, row in enumerate(rows[:_HASH_SIZE]):
        for x, (current, following) in enumerate(zip(row, row[1:])):
            if current > following:
                result |= 1 << (y * _HASH_SIZE + x)
    return result


def compare_hashes(hash1: int, hash2: int) -> int:
    """Hamming distance between two 64-bit hashes."""
    return ((hash1 ^ hash2) & _HASH_MASK).bit_count()


def convert_frame(source: CaptureFrame, target_bytes_per_pixel: int) -> CaptureFrame:
    """Copy or truncate channels into a frame with a different pixel size.

    Channels that the source lacks are filled with zeros.
    """
    if not source.is_valid() or not 1 <= target_bytes_per_pixel <= 4:
        raise ValueError("cannot convert an invalid frame or to an unsupported pixel size")

    copied = min(source.bytes_per_pixel, target_bytes_per_pixel)
    padding = bytes(target_bytes_per_pixel - copied)
    data = b"".join(pixel[:copied] + padding for pixel in _pixels(source))
    return replace(source, data=data, bytes_per_pixel=target_bytes_per_pixel)


def save_frame_to_file(frame: CaptureFrame, filename: Union[str, PathLike]) -> None:
    """Write the frame as a binary PPM (P6) image."""
    if not frame.is_valid():
        raise ValueError("cannot save an invalid frame")

    header = f"P6\n{frame.width} {frame.height}\n255\n".encode("ascii")
    if frame.bytes_per_pixel >= 3:
        body = b"".join(pixel[:3] for pixel in _pixels(frame))
    else:
        body = b"".join(pixel[:1] * 3 for pixel in _pixels(frame))
    Path(filename).write_bytes(header + body)


def crop_frame(source: CaptureFrame, x: int, y: int, width: int, height: int) -> CaptureFrame:
    """Return the rectangular region of the source frame."""
    if (
        not source.is_valid()
        or x < 0
        or y < 0
        or width < 0
        or height < 0
        or x + width > source.width
        or y + height > source.height
    ):
        raise ValueError("crop region lies outside the frame")

    bpp = source.bytes_per_pixel
    stride = source.width * bpp
    rows = (
        source.data[row * stride + x * bpp:row * stride + (x + width) * bpp]
        for row in range(y, y + height)
    )
    return replace(source, data=b"".join(rows), width=width, height=height)