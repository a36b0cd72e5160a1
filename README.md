# workstudy

Building blocks for an assistant that looks at the screen and reads what is
on it. Everything runs on the standard library alone.

| Module | What it offers |
| --- | --- |
| `workstudy.frames` | `CaptureFrame`, difference hashing, channel conversion, cropping, PPM export |
| `workstudy.document` | `OCRResult`, `OCROptions`, `OCRDocument` and the `OCREngine` interface |
| `workstudy.ocr_utils` | image preprocessing and text heuristics |
| `workstudy.tesseract` | `TesseractEngine`, `EngineType`, `create_engine`, `available_engines` |
| `workstudy.paddle` | `PaddleOCREngine`, its configuration, statistics and helpers |
| `workstudy.ocr_manager` | `OCRManager` and `OCRStatistics` |
| `workstudy.capture_manager` | `ScreenCapture` interface, `MonitorInfo`, `ScreenCaptureManager`, `CaptureError` |
| `workstudy.performance` | `PerformanceMonitor`, `perf_timer`, `get_monitor`, `SystemMonitor`, `BenchmarkSuite` |
| `workstudy.thread_pool` | `ThreadPool` |

Install with the test extra to run the tests:

```
pip install .[test]
pytest
```

## Frames

A `CaptureFrame` holds packed pixel bytes row after row, with `width`,
`height`, `bytes_per_pixel` and a `timestamp`. `is_valid()` checks that the
dimensions are positive and that there is enough data; `data_size()` gives the
number of bytes the dimensions call for.

```python
from workstudy.frames import (
    CaptureFrame, calculate_hash, compare_hashes, convert_frame, crop_frame, save_frame_to_file,
)

frame = CaptureFrame(width=32, height=32, bytes_per_pixel=3, data=bytes(32 * 32 * 3))
top_left = crop_frame(frame, 0, 0, 16, 16)       # a new frame, 16x16
rgba = convert_frame(frame, 4)                   # missing channels filled with zeros
save_frame_to_file(frame, "frame.ppm")           # binary PPM (P6)

distance = compare_hashes(calculate_hash(frame), calculate_hash(top_left))
```

`calculate_hash` returns a 64-bit dHash, or 0 for an invalid frame or one with
fewer than three channels; `compare_hashes` returns the Hamming distance.
`crop_frame`, `convert_frame` and `save_frame_to_file` raise `ValueError` for
an invalid frame or an out-of-range argument.

## OCR documents and engines

An `OCRDocument` holds `OCRResult` blocks (text, confidence, bounding box).
`combine_text()` joins the blocks in reading order (top to bottom, then left to
right, with 20 pixels of tolerance for one line) into `full_text`, putting a
newline where the next block lies lower and a space otherwise, and sets
`overall_confidence` to the mean confidence. `ordered_text()` builds the text
if it is still empty; `high_confidence_results(threshold)` filters blocks.

The two engines implement `OCREngine` and are simulations: they return
plausible documents without reading the pixels.

- `TesseractEngine` returns three fixed text blocks for frames wider than 100
  and taller than 50 pixels (those below the confidence threshold are dropped),
  and nothing for smaller frames. `process_image_region` crops first.
- `PaddleOCREngine` returns three to seven randomly placed blocks drawn from a
  list of sample strings; pass a seeded `random.Random` for repeatable output.
  It keeps timing averages in `statistics` (`reset_statistics()` clears them),
  and `set_options` switches the character dictionary for `chi_sim` and
  `chi_tra`.

Both return an empty document when not initialized or given an invalid frame,
and `process_image_async` returns a `concurrent.futures.Future`.
`create_engine(EngineType.TESSERACT)` or `create_engine(EngineType.PADDLE_OCR)`
builds an engine; any other type raises `ValueError`.

The `workstudy.paddle` module also has `convert_to_ocr_document`,
`order_text_by_position`, `merge_text_blocks` (returns the blocks unchanged),
`validate_paddle_model` (whether the file can be opened) and
`available_languages`.

## OCR manager

```python
from workstudy.frames import CaptureFrame
from workstudy.ocr_manager import OCRManager
from workstudy.tesseract import EngineType

frame = CaptureFrame(width=200, height=100, bytes_per_pixel=3, data=bytes(200 * 100 * 3))

manager = OCRManager()
manager.initialize(EngineType.TESSERACT)

document = manager.extract_text(frame)
print(document.ordered_text())
print(manager.extract_keywords(document))   # sorted, lower-cased, common words removed
print(manager.contains_text(frame, "mock")) # case-insensitive
print(manager.statistics)

manager.shutdown()
```

`set_language`, `set_confidence_threshold` and `enable_preprocessing` change
the engine's options. `extract_window_text` always returns an empty document,
since the manager has no way to capture a window by itself.

## Text and image helpers

```python
from workstudy import ocr_utils

ocr_utils.clean_extracted_text("  several   spaces\there ")  # "several spaces here"
ocr_utils.split_into_lines("one\n\ntwo")                    # ["one", "two"]
ocr_utils.extract_words("a, b c")                           # ["a", "b", "c"]
ocr_utils.is_text_meaningful("hello world")                 # True
ocr_utils.detect_language("hello")                          # "eng"
ocr_utils.is_likely_email("write to someone@example.com")   # True
ocr_utils.is_likely_url("see https://example.com/page")     # True
ocr_utils.is_likely_code("int main() { return 0; }")        # True
```

`detect_language` returns `"unknown"` for empty text and otherwise guesses
`"chi_sim"`, `"rus"` or `"eng"` from the UTF-8 bytes.

The image helpers return new frames: `scale_image` (nearest neighbour),
`convert_to_grayscale`, `enhance_contrast`, `denoise_image` (3x3 median),
`binarize_image` and `preprocess_image(frame, options)`, which applies the
steps the `OCROptions` select. They raise `ValueError` for invalid input.

## Watching the screen

`ScreenCaptureManager` works with any `ScreenCapture` backend. Capture
methods return a frame or raise `CaptureError`.

```python
from workstudy.capture_manager import ScreenCapture, ScreenCaptureManager
from workstudy.frames import CaptureFrame

class BlankScreen(ScreenCapture):
    def initialize(self): pass
    def shutdown(self): pass
    def capture_desktop(self):
        return CaptureFrame(width=64, height=48, bytes_per_pixel=3, data=bytes(64 * 48 * 3))
    def capture_window(self, window_handle):
        return self.capture_desktop()
    def capture_region(self, x, y, width, height):
        return CaptureFrame(width=width, height=height, bytes_per_pixel=3,
                            data=bytes(width * height * 3))

manager = ScreenCaptureManager(BlankScreen())
manager.initialize()
manager.set_max_fps(10)                       # clamped to 1..120
manager.set_change_detection_threshold(0.1)   # clamped to 0..1
manager.start_monitoring(lambda frame: print(frame.width, frame.height))
# ...
manager.shutdown()
```

While monitoring, frames whose hash differs from the previous one by less
than the threshold (as a fraction of 64 bits) are skipped;
`enable_change_detection(False)` passes every frame through.
`set_capture_region` makes `capture_now` capture that rectangle;
`reset_capture_region` goes back to the whole desktop.

## Measuring performance

```python
from workstudy.performance import get_monitor, perf_timer

monitor = get_monitor()
with perf_timer("parse", monitor):
    sum(range(100_000))

monitor.increment_counter("documents", 1)
monitor.record_memory_usage("cache", 2048)
print(monitor.stats("parse"))     # avg, min, max, median, p95 in microseconds
monitor.print_report()
monitor.save_report("report.csv")
```

The most recent 1000 timing samples are kept for each metric.
`report()` and `csv_report()` return the two report layouts as text.
`SystemMonitor` gives simulated CPU and memory readings along with the real
process id. `BenchmarkSuite` times simulated workloads into a monitor; pass
`sleep=lambda seconds: None` to run it instantly.

## Thread pool

```python
from workstudy.thread_pool import ThreadPool

with ThreadPool(4) as pool:
    future = pool.submit(pow, 2, 10)
    print(future.result())  # 1024
```

`shutdown()` finishes every queued task before the workers stop; submitting
afterwards raises `RuntimeError`.

## What the package does not do

- It has no screen capture backend of its own; supply a `ScreenCapture`
  implementation for your platform.
- The OCR engines do not recognise real text; they produce simulated
  documents.
- There is no command-line program, background service, web interface or
  storage layer.