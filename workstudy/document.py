"""OCR results, documents and the engine interface."""

from __future__ import annotations

import datetime as _dt
import functools
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass, field
from itertools import zip_longest
from typing import List, Optional

from workstudy.frames import CaptureFrame

SAME_LINE_TOLERANCE = 20
NEW_LINE_GAP = 10


@dataclass
class OCRResult:
    """A recognised piece of text and its bounding box."""

    text: str = ""
    confidence: float = 0.0
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass
class OCROptions:
    """Settings that control recognition and preprocessing."""

    language: str = "eng"
    confidence_threshold: float = 0.5
    auto_preprocess: bool = True
    scale_factor: float = 1.0
    denoise: bool = False
    enhance_contrast: bool = False
    binarize: bool = False
    use_gpu: bool = False
    preserve_whitespace: bool = True


def _reading_order(a: OCRResult, b: OCRResult) -> int:
    if abs(a.y - b.y) > SAME_LINE_TOLERANCE:
        return -1 if a.y < b.y else 1
    return (a.x > b.x) - (a.x < b.x)


@dataclass
class OCRDocument:
    """All text blocks found in one image."""

    text_blocks: List[OCRResult] = field(default_factory=list)
    full_text: str = ""
    overall_confidence: float = 0.0
    timestamp: _dt.datetime = field(default_factory=_dt.datetime.now)
    processing_time_ms: float = 0.0

    def combine_text(self) -> None:
        """Join the blocks in reading order into full_text and average confidence."""
        blocks = sorted(self.text_blocks, key=functools.cmp_to_key(_reading_order))
        parts = []
        for current, following in zip_longest(blocks, blocks[1:]):
            if not current.text:
                continue
            parts.append(current.text)
            if following is not None:
                below = following.y > current.y + current.height + NEW_LINE_GAP
                parts.append("\n" if below else " ")
        self.full_text = "".join(parts)

        if self.text_blocks:
            total = sum(block.confidence for block in self.text_blocks)
            self.overall_confidence = total / len(self.text_blocks)

    def high_confidence_results(self, threshold: float = 0.8) -> List[OCRResult]:
        """Blocks whose confidence reaches the threshold."""
        return [block for block in self.text_blocks if block.confidence >= threshold]

    def ordered_text(self) -> str:
        """The combined text, building it first if it is still empty."""
        if not self.full_text:
            self.combine_text()
        return self.full_text


class OCREngine(ABC):
    """Interface shared by all OCR engines."""

    def __init__(self) -> None:
        self.options = OCROptions()
        self.initialized = False

    @abstractmethod
    def initialize(self, options: Optional[OCROptions] = None) -> None:
        """Prepare the engine for use."""

    @abstractmethod
    def shutdown(self) -> None:
        """Release the engine's resources."""

    @abstractmethod
    def process_image(self, frame: CaptureFrame) -> OCRDocument:
        """Recognise the text in a frame."""

    @abstractmethod
    def process_image_region(
        self, frame: CaptureFrame, x: int, y: int, width: int, height: int
    ) -> OCRDocument:
        """Recognise the text in a region of a frame."""

    @abstractmethod
    def supported_languages(self) -> List[str]:
        """Language codes the engine accepts."""

    @abstractmethod
    def engine_info(self) -> str:
        """A short description of the engine."""

    def process_image_async(self, frame: CaptureFrame) -> "Future[OCRDocument]":
        """Run process_image on a background thread."""
        future: "Future[OCRDocument]" = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self.process_image(frame))
            except BaseException as exc:  # propagated through the future
                future.set_exception(exc)

        threading.Thread(target=run, daemon=True).start()
        return future