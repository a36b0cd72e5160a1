"""Image preprocessing and text heuristics used around OCR."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import List

from workstudy.document import OCROptions
from workstudy.frames import CaptureFrame

_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"\b\w+\b")
_CODE = re.compile(
    r"\{|\}|;|->|=>|==|!=|\+\+|--|#include|function|class|if\s*\(|for\s*\(|while\s*\("
)
_EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b")
_URL = re.compile(r"https?://[^\s]+")


def _require_valid(frame: CaptureFrame) -> None:
    if not frame.is_valid():
        raise ValueError("invalid frame")


def preprocess_image(frame: CaptureFrame, options: OCROptions) -> CaptureFrame:
    """Apply the preprocessing pipeline selected by the options."""
    _require_valid(frame)
    result = frame
    if not options.auto_preprocess:
        return result

    if options.scale_factor != 1.0 and options.scale_factor > 0:
        result = scale_image(result, options.scale_factor)
        if not result.is_valid():
            return result
    if options.denoise:
        result = denoise_image(result)
    if options.enhance_contrast:
        result = enhance_contrast(result)
    if result.bytes_per_pixel >= 3:
        result = convert_to_grayscale(result)
    if options.binarize:
        result = binarize_image(result)
    return result


def scale_image(frame: CaptureFrame, scale: float) -> CaptureFrame:
    """Resize with nearest-neighbour sampling."""
    if not frame.is_valid() or scale <= 0:
        raise ValueError("invalid frame or scale")

    new_width = int(frame.width * scale)
    new_height = int(frame.height * scale)
    bpp = frame.bytes_per_pixel
    columns = [min(int(x / scale), frame.width - 1) for x in range(new_width)]
    out = bytearray()
    for y in range(new_height):
        row_start = min(int(y / scale), frame.height - 1) * frame.width
        for src_x in columns:
            index = (row_start + src_x) * bpp
            out += frame.data[index:index + bpp]
    return replace(frame, data=bytes(out), width=new_width, height=new_height)


def convert_to_grayscale(frame: CaptureFrame) -> CaptureFrame:
    """Convert an RGB or RGBA frame to one byte of luminance per pixel."""
    if not frame.is_valid() or frame.bytes_per_pixel < 3:
        raise ValueError("grayscale conversion needs a colour frame")

    bpp = frame.bytes_per_pixel
    data = frame.data
    gray = bytes(
        int(0.299 * data[i] + 0.587 * data[i + 1] + 0.114 * data[i + 2])
        for i in range(0, frame.width * frame.height * bpp, bpp)
    )
    return replace(frame, data=gray, bytes_per_pixel=1)


def enhance_contrast(frame: CaptureFrame, factor: float = 1.5) -> CaptureFrame:
    """Stretch every byte away from mid-grey by the given factor."""
    if not frame.is_valid() or factor <= 0:
        raise ValueError("invalid frame or contrast factor")
    data = bytes(
        int(max(0.0, min(255.0, (value - 128.0) * factor + 128.0))) for value in frame.data
    )
    return replace(frame, data=data)


def denoise_image(frame: CaptureFrame) -> CaptureFrame:
    """Apply a 3x3 median filter to every interior pixel, channel by channel."""
    _require_valid(frame)
    bpp = frame.bytes_per_pixel
    stride = frame.width * bpp
    source = frame.data
    out = bytearray(source)
    offsets = [dy * stride + dx * bpp for dy in (-1, 0, 1) for dx in (-1, 0, 1)]
    for y in range(1, frame.height - 1):
        for x in range(1, frame.width - 1):
            for channel in range(bpp):
                centre = y * stride + x * bpp + channel
                out[centre] = sorted(source[centre + off] for off in offsets)[4]
    return replace(frame, data=bytes(out))


def binarize_image(frame: CaptureFrame, threshold: int = 128) -> CaptureFrame:
    """Map every byte to 255 if it reaches the threshold, otherwise to 0."""
    _require_valid(frame)
    return replace(frame, data=bytes(255 if v >= threshold else 0 for v in frame.data))


def clean_extracted_text(text: str) -> str:
    """Collapse whitespace, drop unprintable characters and trim."""
    cleaned = _WHITESPACE.sub(" ", text)
    cleaned = "".join(ch for ch in cleaned if ch.isprintable() or ch in "\n\t")
    return cleaned.strip(" \t\n\r")


def split_into_lines(text: str) -> List[str]:
    """Non-empty lines of the text, each cleaned."""
    return [clean_extracted_text(line) for line in text.split("\n") if line]


def extract_words(text: str) -> List[str]:
    """All word-character runs in the text."""
    return _WORD.findall(text)


def is_text_meaningful(text: str, min_ratio: float = 0.5) -> bool:
    """True when alphanumerics make up at least min_ratio of non-space characters."""
    non_space = [ch for ch in text if ch != " "]
    if not non_space:
        return False
    alnum = sum(1 for ch in non_space if ch.isalnum())
    return alnum / len(non_space) >= min_ratio


def detect_language(text: str) -> str:
    """Guess a language code from the UTF-8 byte distribution of the text."""
    if not text:
        return "unknown"

    ascii_count = chinese_count = cyrillic_count = 0
    for byte in text.encode("utf-8"):
        if byte < 128:
            ascii_count += 1
        elif 0xE4 <= byte <= 0xE9:
            chinese_count += 1
        elif 0xD0 <= byte <= 0xDF:
            cyrillic_count += 1

    if chinese_count > ascii_count * 0.1:
        return "chi_sim"
    if cyrillic_count > ascii_count * 0.1:
        return "rus"
    return "eng"


def is_likely_code(text: str) -> bool:
    """True when the text contains typical source-code tokens."""
    return _CODE.search(text) is not None


def is_likely_email(text: str) -> bool:
    """True when the text contains an e-mail address."""
    return _EMAIL.search(text) is not None


def is_likely_url(text: str) -> bool:
    """True when the text contains an http or https URL."""
    return _URL.search(text) is not None