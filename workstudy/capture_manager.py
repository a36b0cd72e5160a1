"""Screen capture backends and the manager that polls them for changed frames."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from workstudy.frames import HASH_BITS, CaptureFrame, calculate_hash, compare_hashes

logger = logging.getLogger(__name__)

FrameCallback = Callable[[CaptureFrame], None]

DEFAULT_CHANGE_THRESHOLD = 0.05
DEFAULT_MAX_FPS = 30
MIN_FPS = 1
MAX_FPS = 120
_IDLE_WAIT_S = 0.01


class CaptureError(RuntimeError):
    """Raised when a capture cannot be made."""


@dataclass
class MonitorInfo:
    """Geometry and identity of one display."""

    id: int = 0
    name: str = ""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    is_primary: bool = False


class ScreenCapture(ABC):
    """A source of screen images. Capture methods raise CaptureError on failure."""

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the backend for capturing."""

    @abstractmethod
    def shutdown(self) -> None:
        """Release the backend's resources."""

    @abstractmethod
    def capture_desktop(self) -> CaptureFrame:
        """Capture the whole desktop."""

    @abstractmethod
    def capture_window(self, window_handle: int) -> CaptureFrame:
        """Capture one window."""

    @abstractmethod
    def capture_region(self, x: int, y: int, width: int, height: int) -> CaptureFrame:
        """Capture a rectangle of the desktop."""

    def monitors(self) -> List[MonitorInfo]:
        """The displays the backend knows about."""
        return []


class ScreenCaptureManager:
    """Captures frames on demand or continuously, skipping frames that barely changed."""

    def __init__(self, backend: Optional[ScreenCapture] = None) -> None:
        self._backend = backend
        self._initialized = False
        self._change_detection = True
        self._change_threshold = DEFAULT_CHANGE_THRESHOLD
        self._max_fps = DEFAULT_MAX_FPS
        self._region: Optional[Tuple[int, int, int, int]] = None
        self._last_hash = 0
        self._callback: Optional[FrameCallback] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def is_monitoring(self) -> bool:
        return self._thread is not None

    @property
    def change_threshold(self) -> float:
        return self._change_threshold

    @property
    def change_detection_enabled(self) -> bool:
        return self._change_detection

    @property
    def max_fps(self) -> int:
        return self._max_fps

    @property
    def capture_region(self) -> Optional[Tuple[int, int, int, int]]:
        return self._region

    def initialize(self) -> None:
        """Start the capture backend."""
        if self._initialized:
            return
        if self._backend is None:
            raise CaptureError("no screen capture backend available")
        self._backend.initialize()
        self._initialized = True
        logger.info("Screen capture manager initialized")

    def shutdown(self) -> None:
        """Stop monitoring and release the backend."""
        if not self._initialized:
            return
        self.stop_monitoring()
        if self._backend is not None:
            self._backend.shutdown()
        self._initialized = False
        logger.info("Screen capture manager shut down")

    def start_monitoring(self, callback: FrameCallback) -> None:
        """Capture continuously in a background thread, handing changed frames to callback."""
        if not self._initialized:
            raise CaptureError("screen capture manager is not initialized")
        if self._thread is not None:
            raise CaptureError("monitoring is already running")
        self._callback = callback
        self._stop.clear()
        self._thread = threading.Thread(target=self._monitoring_loop, daemon=True)
        self._thread.start()
        logger.info("Started screen capture monitoring")

    def stop_monitoring(self) -> None:
        """Stop the background capture thread and wait for it."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        logger.info("Stopped screen capture monitoring")

    def capture_now(self) -> CaptureFrame:
        """Capture the configured region, or the whole desktop when none is set."""
        backend = self._require_backend()
        if self._region is not None:
            return backend.capture_region(*self._region)
        return backend.capture_desktop()

    def capture_window(self, window_handle: int) -> CaptureFrame:
        """Capture one window."""
        return self._require_backend().capture_window(window_handle)

    def set_change_detection_threshold(self, threshold: float) -> None:
        """Fraction of hash bits that must differ for a frame to count as changed."""
        self._change_threshold = max(0.0, min(1.0, threshold))

    def enable_change_detection(self, enable: bool) -> None:
        self._change_detection = enable

    def set_max_fps(self, fps: int) -> None:
        self._max_fps = max(MIN_FPS, min(MAX_FPS, fps))

    def set_capture_region(self, x: int, y: int, width: int, height: int) -> None:
        self._region = (x, y, width, height)

    def reset_capture_region(self) -> None:
        self._region = None

    def _require_backend(self) -> ScreenCapture:
        if not self._initialized or self._backend is None:
            raise CaptureError("screen capture manager is not initialized")
        return self._backend

    def _should_process(self, frame: CaptureFrame) -> bool:
        if not self._change_detection:
            return True
        current = calculate_hash(frame)
        process = True
        if self._last_hash != 0:
            ratio = compare_hashes(current, self._last_hash) / HASH_BITS
            if ratio < self._change_threshold:
                process = False
        self._last_hash = current
        return process

    def _monitoring_loop(self) -> None:
        interval = (1000 // self._max_fps) / 1000.0
        last_capture = time.monotonic()
        while not self._stop.is_set():
            now = time.monotonic()
            if now - last_capture >= interval:
                try:
                    frame = self.capture_now()
                except CaptureError as exc:
                    logger.debug("Capture failed: %s", exc)
                else:
                    if self._should_process(frame) and self._callback is not None:
                        self._callback(frame)
                last_capture = now
            self._stop.wait(_IDLE_WAIT_S)