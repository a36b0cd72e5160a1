"""Timing, memory and counter metrics with text reports, plus a simulated benchmark suite."""

from __future__ import annotations

import contextlib
import logging
import os
import random
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Callable, Deque, Dict, Iterator, List, Optional, TextIO, Tuple, Union

logger = logging.getLogger(__name__)

MAX_SAMPLES = 1000


@dataclass
class PerformanceStats:
    """Summary of one metric; timings are in microseconds."""

    name: str = ""
    avg_time_us: float = 0.0
    min_time_us: int = 0
    max_time_us: int = 0
    median_time_us: int = 0
    p95_time_us: int = 0
    sample_count: int = 0
    memory_bytes: int = 0
    counter_value: int = 0


class PerformanceMonitor:
    """Thread-safe store of timing samples, memory figures and counters."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._timings: Dict[str, Deque[int]] = {}
        self._memory: Dict[str, int] = {}
        self._counters: Dict[str, int] = {}

    def record_timing(self, name: str, duration_us: int) -> None:
        """Add a timing sample; only the most recent samples are kept."""
        with self._lock:
            self._timings.setdefault(name, deque(maxlen=MAX_SAMPLES)).append(duration_us)

    def record_memory_usage(self, name: str, num_bytes: int) -> None:
        with self._lock:
            self._memory[name] = num_bytes

    def record_counter(self, name: str, value: int) -> None:
        with self._lock:
            self._counters[name] = value

    def increment_counter(self, name: str, delta: int = 1) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + delta

    def stats(self, name: str) -> PerformanceStats:
        """Statistics for one metric; zeros where nothing was recorded."""
        with self._lock:
            result = PerformanceStats(name=name)
            timings = self._timings.get(name)
            if timings:
                ordered = sorted(timings)
                count = len(ordered)
                result.avg_time_us = float(sum(ordered) // count)
                result.min_time_us = ordered[0]
                result.max_time_us = ordered[-1]
                result.median_time_us = ordered[count // 2]
                result.p95_time_us = ordered[int(count * 0.95)]
                result.sample_count = count
            result.memory_bytes = self._memory.get(name, 0)
            result.counter_value = self._counters.get(name, 0)
            return result

    def metric_names(self) -> List[str]:
        """Sorted names of every metric of any kind."""
        with self._lock:
            return sorted(set(self._timings) | set(self._memory) | set(self._counters))

    def report(self) -> str:
        """The human-readable report as text."""
        with self._lock:
            lines = [
                "",
                "=== Performance Report ===",
                "Metric".ljust(25) + "".join(
                    h.ljust(12)
                    for h in ("Count", "Avg (μs)", "Min (μs)", "Max (μs)", "P95 (μs)")
                ),
                "-" * 85,
            ]
            for name in sorted(self._timings):
                if not self._timings[name]:
                    continue
                s = self.stats(name)
                lines.append(
                    name.ljust(25)
                    + str(s.sample_count).ljust(12)
                    + f"{s.avg_time_us:.1f}".ljust(12)
                    + str(s.min_time_us).ljust(12)
                    + str(s.max_time_us).ljust(12)
                    + str(s.p95_time_us).ljust(12)
                )
            if self._memory:
                lines += ["", "=== Memory Usage ===",
                          "Component".ljust(25) + "Memory (KB)".ljust(15), "-" * 40]
                for name in sorted(self._memory):
                    kb = self._memory[name] / 1024.0
                    lines.append(name.ljust(25) + f"{kb:.1f}".ljust(15))
            if self._counters:
                lines += ["", "=== Counters ===",
                          "Counter".ljust(25) + "Value".ljust(15), "-" * 40]
                for name in sorted(self._counters):
                    lines.append(name.ljust(25) + str(self._counters[name]).ljust(15))
            lines.append("")
            return "\n".join(lines) + "\n"

    def print_report(self) -> None:
        """Write the report to standard output."""
        out: TextIO = sys.stdout
        out.write(self.report())
        out.flush()

    def csv_report(self) -> str:
        """The report in the comma-separated file layout."""
        with self._lock:
            lines = [
                "Performance Report",
                f"Generated: {int(time.time())}",
                "",
                "Timing Metrics:",
                "Metric,Count,Avg(μs),Min(μs),Max(μs),P95(μs)",
            ]
            for name in sorted(self._timings):
                if not self._timings[name]:
                    continue
                s = self.stats(name)
                lines.append(
                    f"{name},{s.sample_count},{s.avg_time_us:g},"
                    f"{s.min_time_us},{s.max_time_us},{s.p95_time_us}"
                )
            lines += ["", "Memory Usage:", "Component,Memory(bytes)"]
            lines += [f"{name},{self._memory[name]}" for name in sorted(self._memory)]
            lines += ["", "Counters:", "Counter,Value"]
            lines += [f"{name},{self._counters[name]}" for name in sorted(self._counters)]
            return "\n".join(lines) + "\n"

    def save_report(self, filename: Union[str, PathLike]) -> None:
        """Write the comma-separated report to a file."""
        Path(filename).write_text(self.csv_report(), encoding="utf-8")
        logger.info("Performance report saved to: %s", filename)

    def reset(self) -> None:
        with self._lock:
            self._timings.clear()
            self._memory.clear()
            self._counters.clear()


_GLOBAL_MONITOR = PerformanceMonitor()


def get_monitor() -> PerformanceMonitor:
    """The process-wide performance monitor."""
    return _GLOBAL_MONITOR


@contextlib.contextmanager
def perf_timer(name: str, monitor: Optional[PerformanceMonitor] = None) -> Iterator[None]:
    """Time the enclosed block and record it in microseconds."""
    target = monitor if monitor is not None else get_monitor()
    start = time.perf_counter_ns()
    try:
        yield
    finally:
        target.record_timing(name, (time.perf_counter_ns() - start) // 1000)


@dataclass
class SystemStats:
    """A snapshot of system load and this process's footprint."""

    cpu_usage_percent: float = 0.0
    memory_used_mb: int = 0
    memory_total_mb: int = 0
    process_id: int = 0
    process_memory_mb: int = 0


class SystemMonitor:
    """Simulated system readings that drift between calls."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._cpu = 2.5

    def system_stats(self) -> SystemStats:
        used, total = self.memory_usage()
        return SystemStats(
            cpu_usage_percent=self.cpu_usage(),
            memory_used_mb=used,
            memory_total_mb=total,
            process_id=os.getpid(),
            process_memory_mb=self.process_memory(),
        )

    def cpu_usage(self) -> float:
        """Simulated CPU usage, kept between 0 and 100 percent."""
        self._cpu += (self._rng.randrange(20) - 10) * 0.1
        return max(0.0, min(100.0, self._cpu))

    def memory_usage(self) -> Tuple[int, int]:
        """Simulated (used, total) memory in megabytes."""
        return 4096 + self._rng.randrange(1024), 8192

    def process_memory(self) -> int:
        """Simulated memory of this process in megabytes."""
        return 150 + self._rng.randrange(50)


class BenchmarkSuite:
    """Simulated workloads timed into a performance monitor."""

    def __init__(
        self,
        monitor: Optional[PerformanceMonitor] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.monitor = monitor if monitor is not None else get_monitor()
        self._sleep = sleep
        self._rng = rng or random.Random()

    def _run(self, timer: str, counter: str, iterations: int, base_ms: int, spread_ms: int) -> None:
        for _ in range(iterations):
            with perf_timer(timer, self.monitor):
                self._sleep((base_ms + self._rng.randrange(spread_ms)) / 1000.0)
            self.monitor.increment_counter(counter, 1)

    def run_all(self) -> None:
        logger.info("Running benchmark suite...")
        self.benchmark_ocr()
        self.benchmark_screen_capture()
        self.benchmark_ai_analysis()
        self.benchmark_web_interface()
        logger.info("Benchmark suite completed.")
        self.monitor.print_report()

    def benchmark_ocr(self) -> None:
        logger.info("Benchmarking OCR performance...")
        for _ in range(10):
            with perf_timer("OCR_Fast_Mode", self.monitor):
                self._sleep((50 + self._rng.randrange(50)) / 1000.0)
            with perf_timer("OCR_Accurate_Mode", self.monitor):
                self._sleep((150 + self._rng.randrange(100)) / 1000.0)
            self.monitor.increment_counter("OCR_Documents_Processed", 1)

    def benchmark_screen_capture(self) -> None:
        logger.info("Benchmarking screen capture...")
        self._run("Screen_Capture", "Frames_Captured", 20, 16, 10)

    def benchmark_ai_analysis(self) -> None:
        logger.info("Benchmarking AI analysis...")
        self._run("AI_Content_Analysis", "AI_Analyses_Completed", 5, 200, 300)

    def benchmark_web_interface(self) -> None:
        logger.info("Benchmarking web interface...")
        self._run("Web_API_Request", "API_Requests_Served", 50, 5, 20)