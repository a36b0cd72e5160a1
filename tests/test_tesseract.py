import pytest

from workstudy.document import OCROptions
from workstudy.frames import CaptureFrame
from workstudy.paddle import PaddleOCREngine
from workstudy.tesseract import (
    EngineType,
    TesseractEngine,
    available_engines,
    create_engine,
)


def _frame(width=200, height=100):
    return CaptureFrame(data=bytes(width * height * 3), width=width, height=height,
                        bytes_per_pixel=3)


@pytest.fixture
def engine():
    eng = TesseractEngine()
    eng.initialize()
    return eng


def test_process_image_yields_three_blocks_in_order(engine):
    doc = engine.process_image(_frame())
    assert [b.text for b in doc.text_blocks] == [
        "Sample text detected", "Mock OCR result", "This is simulated content",
    ]
    assert doc.full_text == (
        "Sample text detected Mock OCR result This is simulated content"
    )


def test_block_geometry(engine):
    doc = engine.process_image(_frame())
    for block in doc.text_blocks:
        assert block.width == len(block.text) * 8
        assert block.height == 20
    assert [b.x for b in doc.text_blocks] == [10, 60, 110]


def test_timestamp_comes_from_frame(engine):
    frame = _frame()
    assert engine.process_image(frame).timestamp == frame.timestamp


def test_small_frame_has_no_text(engine):
    doc = engine.process_image(_frame(100, 100))
    assert doc.text_blocks == []
    assert doc.full_text == ""


def test_confidence_threshold_filters(engine):
    engine.set_options(OCROptions(confidence_threshold=0.88))
    doc = engine.process_image(_frame())
    assert len(doc.text_blocks) == 2
    assert all(b.confidence >= 0.88 for b in doc.text_blocks)


def test_uninitialized_and_invalid(engine):
    assert TesseractEngine().process_image(_frame()).text_blocks == []
    assert engine.process_image(CaptureFrame()).text_blocks == []


def test_region_outside_frame_is_empty(engine):
    assert engine.process_image_region(_frame(), 150, 0, 100, 10).text_blocks == []


def test_region_inside_frame_is_processed(engine):
    assert len(engine.process_image_region(_frame(300, 200), 0, 0, 150, 80).text_blocks) == 3
    assert engine.process_image_region(_frame(300, 200), 0, 0, 80, 80).text_blocks == []


def test_async_processing(engine):
    doc = engine.process_image_async(_frame()).result(timeout=5)
    assert len(doc.text_blocks) == 3


def test_shutdown(engine):
    engine.shutdown()
    assert engine.initialized is False
    assert engine.process_image(_frame()).text_blocks == []


def test_info_and_languages(engine):
    assert engine.engine_info() == "Mock Tesseract OCR Engine v5.0 (simulated)"
    assert "kor" in engine.supported_languages()


def test_factory():
    assert isinstance(create_engine(EngineType.TESSERACT), TesseractEngine)
    assert isinstance(create_engine(EngineType.PADDLE_OCR), PaddleOCREngine)
    with pytest.raises(ValueError):
        create_engine(EngineType.WINDOWS_OCR)
    assert available_engines() == [EngineType.TESSERACT]