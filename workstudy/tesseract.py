"""A simulated Tesseract engine and the OCR engine factory."""

from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import Future
from typing import List, Optional

from workstudy.document import OCRDocument, OCREngine, OCROptions, OCRResult
from workstudy.frames import CaptureFrame, crop_frame
from workstudy.paddle import PaddleOCREngine

logger = logging.getLogger(__name__)

_SIMULATED_TEXTS = (
    "Sample text detected",
    "Mock OCR result",
    "This is simulated content",
)


class EngineType(enum.Enum):
    """Kinds of OCR engine the factory knows about."""

    TESSERACT = "tesseract"
    WINDOWS_OCR = "windows_ocr"
    PADDLE_OCR = "paddle_ocr"


class TesseractEngine(OCREngine):
    """OCR engine producing simulated Tesseract results."""

    def initialize(self, options: Optional[OCROptions] = None) -> None:
        if self.initialized:
            return
        self.options = options if options is not None else OCROptions()
        logger.info("Tesseract OCR engine initialized with language: %s", self.options.language)
        self.initialized = True

    def shutdown(self) -> None:
        if not self.initialized:
            return
        self.initialized = False
        logger.info("Tesseract OCR engine shut down")

    def process_image(self, frame: CaptureFrame) -> OCRDocument:
        """Simulated recognition; frames above 100x50 yield three text blocks."""
        if not self.initialized or not frame.is_valid():
            return OCRDocument()

        document = OCRDocument(timestamp=frame.timestamp)
        if frame.width > 100 and frame.height > 50:
            for i, text in enumerate(_SIMULATED_TEXTS):
                result = OCRResult(
                    text=text,
                    confidence=0.85 + i * 0.05,
                    x=10 + i * 50,
                    y=10 + i * 30,
                    width=len(text) * 8,
                    height=20,
                )
                if result.confidence >= self.options.confidence_threshold:
                    document.text_blocks.append(result)
        document.full_text = document.ordered_text()
        return document

    def process_image_region(
        self, frame: CaptureFrame, x: int, y: int, width: int, height: int
    ) -> OCRDocument:
        """Crop the frame and process the region; empty if the crop fails."""
        if not self.initialized or not frame.is_valid():
            return OCRDocument()
        try:
            cropped = crop_frame(frame, x, y, width, height)
        except ValueError:
            return OCRDocument()
        return self.process_image(cropped)

    def process_image_async(self, frame: CaptureFrame) -> "Future[OCRDocument]":
        """Process the frame on a background thread; the future holds the document."""
        future: Future = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self.process_image(frame))
            except BaseException as exc:  # noqa: BLE001 - handed to the caller
                future.set_exception(exc)

        threading.Thread(target=run, daemon=True).start()
        return future

    def set_options(self, options: OCROptions) -> None:
        self.options = options

    def supported_languages(self) -> List[str]:
        return ["eng", "chi_sim", "chi_tra", "fra", "deu", "spa", "rus", "jpn", "kor"]

    def engine_info(self) -> str:
        return "Mock Tesseract OCR Engine v5.0 (simulated)"


def create_engine(engine_type: EngineType) -> OCREngine:
    """Build an engine of the given type."""
    if engine_type is EngineType.TESSERACT:
        return TesseractEngine()
    if engine_type is EngineType.PADDLE_OCR:
        return PaddleOCREngine()
    raise ValueError(f"unsupported OCR engine type: {engine_type}")


def available_engines() -> List[EngineType]:
    """Engine types that can be created on this system."""
    return [EngineType.TESSERACT]