import statistics

import pytest

from workstudy.document import OCRDocument, OCREngine, OCRResult
from workstudy.frames import CaptureFrame


def _blocks():
    return [
        OCRResult("Bye", 0.5, x=0, y=100, width=30, height=20),
        OCRResult("World", 1.0, x=60, y=5, width=50, height=20),
        OCRResult("Hello", 0.75, x=0, y=0, width=50, height=20),
    ]


def test_combine_text_uses_reading_order():
    doc = OCRDocument(text_blocks=_blocks())
    doc.combine_text()
    assert doc.full_text == "Hello World\nBye"


def test_combine_text_averages_confidence():
    blocks = _blocks()
    doc = OCRDocument(text_blocks=blocks)
    doc.combine_text()
    assert doc.overall_confidence == pytest.approx(
        statistics.mean(b.confidence for b in blocks)
    )


def test_empty_blocks_are_skipped():
    doc = OCRDocument(
        text_blocks=[
            OCRResult("", 0.5, x=0, y=0, width=10, height=10),
            OCRResult("Only", 0.5, x=30, y=0, width=10, height=10),
        ]
    )
    assert doc.ordered_text() == "Only"


def test_empty_document():
    doc = OCRDocument()
    assert doc.ordered_text() == ""
    assert doc.overall_confidence == 0.0


def test_ordered_text_keeps_existing_text():
    doc = OCRDocument(text_blocks=_blocks(), full_text="already set")
    assert doc.ordered_text() == "already set"


def test_high_confidence_results_filters():
    doc = OCRDocument(text_blocks=_blocks())
    high = doc.high_confidence_results(0.75)
    assert {b.text for b in high} == {"World", "Hello"}
    assert all(b.confidence >= 0.75 for b in high)


class _EchoEngine(OCREngine):
    def initialize(self, options=None):
        self.initialized = True

    def shutdown(self):
        self.initialized = False

    def process_image(self, frame):
        return OCRDocument(text_blocks=[OCRResult(f"{frame.width}x{frame.height}", 1.0)])

    def process_image_region(self, frame, x, y, width, height):
        return self.process_image(frame)

    def supported_languages(self):
        return ["eng"]

    def engine_info(self):
        return "echo"


def test_process_image_async_returns_same_result():
    engine = _EchoEngine()
    frame = CaptureFrame(bytes(12), 2, 2, 3)
    doc = engine.process_image_async(frame).result(timeout=5)
    assert doc.ordered_text() == engine.process_image(frame).ordered_text()


def test_process_image_async_propagates_errors():
    class Broken(_EchoEngine):
        def process_image(self, frame):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        Broken().process_image_async(CaptureFrame()).result(timeout=5)


def test_engine_interface_is_abstract():
    with pytest.raises(TypeError):
        OCREngine()