"""High-level OCR front end: engine lifecycle, text search, keywords and statistics."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, replace
from typing import List, Optional

from workstudy.document import OCRDocument, OCREngine, OCROptions
from workstudy.frames import CaptureFrame
from workstudy.ocr_utils import clean_extracted_text
from workstudy.tesseract import EngineType, create_engine

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 3
COMMON_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had", "her",
    "was", "one", "our", "out", "day", "get", "has", "him", "his", "how", "man",
    "new", "now", "old", "see", "two", "way", "who", "boy", "did", "its", "let",
    "put", "say", "she", "too", "use",
})


@dataclass
class OCRStatistics:
    """Counts and running averages over the documents extracted so far."""

    total_processed: int = 0
    successful_extractions: int = 0
    average_confidence: float = 0.0
    average_processing_time_ms: float = 0.0


class OCRManager:
    """Owns an OCR engine and offers text extraction on top of it."""

    def __init__(self) -> None:
        self._engine: Optional[OCREngine] = None
        self._initialized = False
        self._statistics = OCRStatistics()
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def engine(self) -> Optional[OCREngine]:
        return self._engine

    @property
    def options(self) -> Optional[OCROptions]:
        """The current engine options, or None when no engine is loaded."""
        return self._engine.options if self._engine is not None else None

    @property
    def statistics(self) -> OCRStatistics:
        """A snapshot of the extraction statistics."""
        with self._lock:
            return replace(self._statistics)

    def initialize(self, engine_type: EngineType = EngineType.TESSERACT) -> None:
        """Create and start an engine of the given type.

        Raises ValueError when the engine type cannot be created.
        """
        if self._initialized:
            return
        engine = create_engine(engine_type)
        engine.initialize(
            OCROptions(language="eng", confidence_threshold=0.5, auto_preprocess=True)
        )
        self._engine = engine
        self._initialized = True
        logger.info("OCR Manager initialized with %s", engine.engine_info())

    def shutdown(self) -> None:
        """Stop and release the engine."""
        if not self._initialized:
            return
        if self._engine is not None:
            self._engine.shutdown()
            self._engine = None
        self._initialized = False
        logger.info("OCR Manager shut down")

    def extract_text(self, frame: CaptureFrame) -> OCRDocument:
        """Recognise the text in a frame; an empty document when not initialized."""
        if not self._initialized or self._engine is None:
            return OCRDocument()
        start = time.perf_counter()
        document = self._engine.process_image(frame)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self._update_statistics(document, elapsed_ms)
        return document

    def extract_text_async(self, frame: CaptureFrame) -> "Future[OCRDocument]":
        """Recognise the text in a frame on a background thread."""
        if not self._initialized or self._engine is None:
            future: "Future[OCRDocument]" = Future()
            future.set_result(OCRDocument())
            return future
        return self._engine.process_image_async(frame)

    def extract_window_text(self, window_handle: int) -> OCRDocument:
        """Text of a window; window capture is not wired in, so the document is empty."""
        return OCRDocument()

    def contains_text(self, frame: CaptureFrame, search_text: str) -> bool:
        """Case-insensitive search for a string in the frame's recognised text."""
        text = self.extract_text(frame).ordered_text()
        return search_text.lower() in text.lower()

    def extract_keywords(self, document: OCRDocument) -> List[str]:
        """Distinct, lower-cased, sorted words of three or more characters that are not common words."""
        text = document.ordered_text()
        keywords = set()
        for raw in text.split():
            word = clean_extracted_text(raw)
            if len(word) >= MIN_KEYWORD_LENGTH and word.lower() not in COMMON_WORDS:
                keywords.add(word.lower())
        return sorted(keywords)

    def set_language(self, language: str) -> None:
        self._update_options(language=language)

    def set_confidence_threshold(self, threshold: float) -> None:
        self._update_options(confidence_threshold=threshold)

    def enable_preprocessing(self, enable: bool) -> None:
        self._update_options(auto_preprocess=enable)

    def reset_statistics(self) -> None:
        with self._lock:
            self._statistics = OCRStatistics()

    def _update_options(self, **changes: object) -> None:
        if self._engine is None:
            return
        options = replace(self._engine.options, **changes)
        setter = getattr(self._engine, "set_options", None)
        if setter is not None:
            setter(options)
        else:
            self._engine.options = options

    def _update_statistics(self, document: OCRDocument, elapsed_ms: float) -> None:
        with self._lock:
            stats = self._statistics
            stats.total_processed += 1
            if document.text_blocks:
                stats.successful_extractions += 1
                previous = stats.average_confidence * (stats.successful_extractions - 1)
                stats.average_confidence = (
                    (previous + document.overall_confidence) / stats.successful_extractions
                )
            previous_time = stats.average_processing_time_ms * (stats.total_processed - 1)
            stats.average_processing_time_ms = (
                (previous_time + elapsed_ms) / stats.total_processed
            )