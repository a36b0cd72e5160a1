import threading
import time

import pytest

from workstudy.capture_manager import (
    CaptureError,
    MonitorInfo,
    ScreenCapture,
    ScreenCaptureManager,
)
from workstudy.frames import CaptureFrame, crop_frame


def gradient_frame(size=9):
    data = bytearray()
    for _ in range(size):
        for x in range(size):
            value = 250 - 25 * x
            data += bytes((value, value, value))
    return CaptureFrame(data=bytes(data), width=size, height=size, bytes_per_pixel=3)


class FakeCapture(ScreenCapture):
    def __init__(self, frame):
        self.frame = frame
        self.calls = []
        self.active = False
        self._lock = threading.Lock()

    def initialize(self):
        self.active = True

    def shutdown(self):
        self.active = False

    def _record(self, call):
        with self._lock:
            self.calls.append(call)

    def capture_desktop(self):
        self._record("desktop")
        return self.frame

    def capture_window(self, window_handle):
        self._record(("window", window_handle))
        return self.frame

    def capture_region(self, x, y, width, height):
        self._record(("region", x, y, width, height))
        return crop_frame(self.frame, x, y, width, height)


def make_manager():
    backend = FakeCapture(gradient_frame())
    manager = ScreenCaptureManager(backend)
    manager.initialize()
    return manager, backend


def test_initialize_without_backend_raises():
    with pytest.raises(CaptureError):
        ScreenCaptureManager().initialize()


def test_capture_before_initialize_raises():
    manager = ScreenCaptureManager(FakeCapture(gradient_frame()))
    with pytest.raises(CaptureError):
        manager.capture_now()


def test_initialize_and_shutdown_drive_backend():
    manager, backend = make_manager()
    assert backend.active is True
    manager.shutdown()
    assert backend.active is False
    assert manager.initialized is False


def test_capture_now_uses_desktop_then_region():
    manager, backend = make_manager()
    frame = manager.capture_now()
    assert frame.width == 9
    assert backend.calls[-1] == "desktop"

    manager.set_capture_region(1, 1, 3, 3)
    region = manager.capture_now()
    assert (region.width, region.height) == (3, 3)
    assert backend.calls[-1] == ("region", 1, 1, 3, 3)

    manager.reset_capture_region()
    manager.capture_now()
    assert backend.calls[-1] == "desktop"


def test_capture_window_passes_handle():
    manager, backend = make_manager()
    manager.capture_window(42)
    assert backend.calls[-1] == ("window", 42)


def test_threshold_is_clamped():
    manager = ScreenCaptureManager()
    manager.set_change_detection_threshold(1.5)
    assert manager.change_threshold == 1.0
    manager.set_change_detection_threshold(-0.5)
    assert manager.change_threshold == 0.0


def test_max_fps_is_clamped():
    manager = ScreenCaptureManager()
    manager.set_max_fps(500)
    assert manager.max_fps == 120
    manager.set_max_fps(0)
    assert manager.max_fps == 1


def test_unchanged_frames_are_skipped():
    manager, backend = make_manager()
    manager.set_max_fps(120)
    received = []
    manager.start_monitoring(received.append)
    time.sleep(0.3)
    manager.stop_monitoring()
    assert len(received) == 1
    assert len(backend.calls) > 1
    assert manager.is_monitoring is False


def test_all_frames_delivered_without_change_detection():
    manager, backend = make_manager()
    manager.set_max_fps(120)
    manager.enable_change_detection(False)
    received = []
    manager.start_monitoring(received.append)
    time.sleep(0.3)
    manager.stop_monitoring()
    assert len(received) >= 2
    assert len(received) == len(backend.calls)


def test_start_monitoring_twice_raises():
    manager, _ = make_manager()
    manager.start_monitoring(lambda frame: None)
    try:
        with pytest.raises(CaptureError):
            manager.start_monitoring(lambda frame: None)
    finally:
        manager.shutdown()
    assert manager.is_monitoring is False


def test_start_monitoring_requires_initialize():
    manager = ScreenCaptureManager(FakeCapture(gradient_frame()))
    with pytest.raises(CaptureError):
        manager.start_monitoring(lambda frame: None)


def test_default_monitor_list_is_empty():
    backend = FakeCapture(gradient_frame())
    assert backend.monitors() == []
    info = MonitorInfo(id=1, name="Primary Display", width=9, height=9, is_primary=True)
    assert info.name == "Primary Display"