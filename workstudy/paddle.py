"""A PaddleOCR-style engine with simulated detection and recognition."""

from __future__ import annotations

import functools
import logging
import random
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field, replace
from os import PathLike
from typing import List, Optional, Sequence, Union

from workstudy.document import OCRDocument, OCREngine, OCROptions, OCRResult
from workstudy.frames import CaptureFrame

logger = logging.getLogger(__name__)

CHINESE_DICT_PATH = "models/paddle_ocr/ppocr_keys_chinese_v1.txt"
_LANGUAGES = ("eng", "chi_sim", "chi_tra", "french", "german", "korean", "japan")
_SAME_LINE_TOLERANCE = 20
_SAMPLE_TEXTS = (
    "Hello World",
    "PaddleOCR v4",
    "文字识别测试",
    "OCR Engine",
    "智能文字识别",
    "Deep Learning",
    "人工智能",
    "Computer Vision",
    "图像处理",
    "Machine Learning",
)


@dataclass
class PaddleOCRConfig:
    """Model locations and inference settings."""

    det_model_path: str = "models/paddle_ocr/det"
    rec_model_path: str = "models/paddle_ocr/rec"
    cls_model_path: str = "models/paddle_ocr/cls"
    rec_char_dict_path: str = "models/paddle_ocr/ppocr_keys_v1.txt"
    use_gpu: bool = False
    use_angle_cls: bool = True
    det_db_thresh: float = 0.3
    det_db_box_thresh: float = 0.6
    rec_batch_num: int = 6
    cpu_threads: int = 4


@dataclass
class PaddleStatistics:
    """Running averages of the engine's timings."""

    total_processed: int = 0
    avg_detection_time_ms: float = 0.0
    avg_recognition_time_ms: float = 0.0
    avg_total_time_ms: float = 0.0


@dataclass
class PaddleDetectionResult:
    """Detected text boxes as [x1, y1, x2, y2] with their scores."""

    boxes: List[List[int]] = field(default_factory=list)
    scores: List[float] = field(default_factory=list)


@dataclass
class PaddleRecognitionResult:
    """Recognised strings, one per detected box, with their scores."""

    texts: List[str] = field(default_factory=list)
    scores: List[float] = field(default_factory=list)


class PaddleOCREngine(OCREngine):
    """OCR engine that simulates the PaddleOCR detect-then-recognise pipeline."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        super().__init__()
        self.config = PaddleOCRConfig()
        self.statistics = PaddleStatistics()
        self._rng = rng or random.Random()

    def initialize(self, options: Optional[OCROptions] = None) -> None:
        """Store the options and load the models."""
        if self.initialized:
            return
        self.options = options if options is not None else OCROptions()
        self._load_models()
        self.initialized = True
        logger.info("PaddleOCR v4 engine initialized")

    def shutdown(self) -> None:
        """Release model resources."""
        if not self.initialized:
            return
        logger.info("Cleaning up PaddleOCR resources")
        self.initialized = False

    def process_image(self, frame: CaptureFrame) -> OCRDocument:
        """Detect and recognise text; an empty document if not ready or frame invalid."""
        if not self.initialized or not frame.is_valid():
            return OCRDocument()

        start = time.perf_counter()
        detection = self._detect(frame)
        recognition = self._recognise(detection)
        document = convert_to_ocr_document(detection, recognition)
        document.processing_time_ms = (time.perf_counter() - start) * 1000.0
        self._update_statistics(document.processing_time_ms)
        return document

    def process_image_region(
        self, frame: CaptureFrame, x: int, y: int, width: int, height: int
    ) -> OCRDocument:
        """Process a region; the whole frame is used as the region."""
        if not self.initialized or not frame.is_valid():
            return OCRDocument()
        return self.process_image(frame)

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
        """Replace the options and adapt the model configuration to them."""
        self.options = options
        self._update_configuration()

    def set_paddle_config(self, config: PaddleOCRConfig) -> None:
        """Replace the model configuration, then adapt it to the options."""
        self.config = replace(config)
        self._update_configuration()

    def supported_languages(self) -> List[str]:
        return list(_LANGUAGES)

    def engine_info(self) -> str:
        return "PaddleOCR v4 Engine (PP-OCRv4) - Lightweight & Fast"

    def initialize_paddle(self, config: PaddleOCRConfig) -> None:
        """Adopt a model configuration and load its models."""
        self.config = replace(config)
        self._load_models()

    def reset_statistics(self) -> None:
        self.statistics = PaddleStatistics()

    def _load_models(self) -> None:
        logger.info("Detection model: %s", self.config.det_model_path)
        logger.info("Recognition model: %s", self.config.rec_model_path)
        logger.info("Classification model: %s", self.config.cls_model_path)

    def _update_configuration(self) -> None:
        if self.options.use_gpu and not self.config.use_gpu:
            self.config.use_gpu = True
            logger.info("Enabled GPU acceleration for PaddleOCR")
        if self.options.language in ("chi_sim", "chi_tra"):
            self.config.rec_char_dict_path = CHINESE_DICT_PATH

    def _detect(self, frame: CaptureFrame) -> PaddleDetectionResult:
        rng = self._rng
        half_w = max(1, frame.width // 2)
        half_h = max(1, frame.height // 2)
        result = PaddleDetectionResult()
        for _ in range(3 + rng.randrange(5)):
            result.boxes.append([
                rng.randrange(half_w),
                rng.randrange(half_h),
                frame.width // 2 + rng.randrange(half_w),
                frame.height // 2 + rng.randrange(half_h),
            ])
            result.scores.append(0.85 + rng.randrange(15) / 100.0)
        self.statistics.avg_detection_time_ms = 45.0 + rng.randrange(20)
        return result

    def _recognise(self, detection: PaddleDetectionResult) -> PaddleRecognitionResult:
        rng = self._rng
        result = PaddleRecognitionResult()
        for _ in detection.boxes:
            result.texts.append(rng.choice(_SAMPLE_TEXTS))
            result.scores.append(0.90 + rng.randrange(10) / 100.0)
        self.statistics.avg_recognition_time_ms = 25.0 + rng.randrange(15)
        return result

    def _update_statistics(self, total_time_ms: float) -> None:
        stats = self.statistics
        stats.total_processed += 1
        previous = stats.avg_total_time_ms * (stats.total_processed - 1)
        stats.avg_total_time_ms = (previous + total_time_ms) / stats.total_processed


def convert_to_ocr_document(
    det_result: PaddleDetectionResult, rec_result: PaddleRecognitionResult
) -> OCRDocument:
    """Pair detected boxes with recognised texts into an OCR document."""
    document = OCRDocument()
    for box, text, score in zip(det_result.boxes, rec_result.texts, rec_result.scores):
        block = OCRResult(text=text, confidence=score)
        if len(box) >= 4:
            block.x, block.y = box[0], box[1]
            block.width = box[2] - box[0]
            block.height = box[3] - box[1]
        document.text_blocks.append(block)

    if document.text_blocks:
        total = sum(block.confidence for block in document.text_blocks)
        document.overall_confidence = total / len(document.text_blocks)
    document.full_text = document.ordered_text()
    return document


def merge_text_blocks(blocks: Sequence[OCRResult]) -> List[OCRResult]:
    """Merge neighbouring blocks; blocks are currently kept as they are."""
    return list(blocks)


def _reading_order(a: OCRResult, b: OCRResult) -> int:
    if abs(a.y - b.y) > _SAME_LINE_TOLERANCE:
        return -1 if a.y < b.y else 1
    return (a.x > b.x) - (a.x < b.x)


def order_text_by_position(blocks: Sequence[OCRResult]) -> str:
    """Join block texts with spaces, top to bottom and left to right."""
    ordered = sorted(blocks, key=functools.cmp_to_key(_reading_order))
    return " ".join(block.text for block in ordered)


def validate_paddle_model(model_path: Union[str, PathLike]) -> bool:
    """True when the model file exists and can be opened."""
    try:
        with open(model_path, "rb"):
            return True
    except OSError:
        return False


def available_languages() -> List[str]:
    """Language codes PaddleOCR models exist for."""
    return list(_LANGUAGES)