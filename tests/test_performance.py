import os
import random

from workstudy.performance import (
    BenchmarkSuite,
    PerformanceMonitor,
    SystemMonitor,
    get_monitor,
    perf_timer,
)


def test_timing_statistics():
    monitor = PerformanceMonitor()
    for value in (40, 10, 30, 20):
        monitor.record_timing("op", value)
    stats = monitor.stats("op")
    assert stats.sample_count == 4
    assert stats.min_time_us == 10
    assert stats.max_time_us == 40
    assert stats.median_time_us == 30
    assert stats.p95_time_us == 40
    assert stats.avg_time_us == 25.0


def test_only_recent_samples_kept():
    monitor = PerformanceMonitor()
    for value in range(1005):
        monitor.record_timing("op", value)
    stats = monitor.stats("op")
    assert stats.sample_count == 1000
    assert stats.min_time_us == 5
    assert stats.max_time_us == 1004


def test_unknown_metric_is_empty():
    stats = PerformanceMonitor().stats("missing")
    assert stats.name == "missing"
    assert stats.sample_count == 0
    assert stats.memory_bytes == 0


def test_counters_and_memory():
    monitor = PerformanceMonitor()
    monitor.increment_counter("hits", 2)
    monitor.increment_counter("hits", 3)
    assert monitor.stats("hits").counter_value == 5
    monitor.record_counter("hits", 1)
    assert monitor.stats("hits").counter_value == 1
    monitor.record_memory_usage("cache", 2048)
    assert monitor.stats("cache").memory_bytes == 2048


def test_metric_names_sorted_and_unique():
    monitor = PerformanceMonitor()
    monitor.record_timing("zeta", 1)
    monitor.record_counter("alpha", 1)
    monitor.record_memory_usage("zeta", 10)
    monitor.record_memory_usage("mid", 10)
    assert monitor.metric_names() == ["alpha", "mid", "zeta"]


def test_reset_clears_everything():
    monitor = PerformanceMonitor()
    monitor.record_timing("op", 1)
    monitor.record_counter("c", 1)
    monitor.reset()
    assert monitor.metric_names() == []


def test_perf_timer_records_one_sample():
    monitor = PerformanceMonitor()
    with perf_timer("block", monitor):
        sum(range(100))
    stats = monitor.stats("block")
    assert stats.sample_count == 1
    assert stats.min_time_us >= 0


def test_get_monitor_is_shared():
    name = "test_shared_monitor_counter"
    before = get_monitor().stats(name).counter_value
    get_monitor().increment_counter(name, 3)
    assert get_monitor().stats(name).counter_value == before + 3


def test_print_report(capsys):
    monitor = PerformanceMonitor()
    monitor.record_timing("render", 12)
    monitor.record_memory_usage("cache", 2048)
    monitor.record_counter("frames", 7)
    monitor.print_report()
    out = capsys.readouterr().out
    assert "=== Performance Report ===" in out
    assert "=== Memory Usage ===" in out
    assert "=== Counters ===" in out
    assert "render" in out


def test_save_report(tmp_path):
    monitor = PerformanceMonitor()
    monitor.record_timing("op", 10)
    monitor.record_timing("op", 20)
    monitor.record_memory_usage("cache", 2048)
    monitor.record_counter("frames", 7)
    path = tmp_path / "report.csv"
    monitor.save_report(path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Performance Report"
    assert "Timing Metrics:" in lines
    assert any(line.startswith("op,2,") for line in lines)
    assert "cache,2048" in lines
    assert "frames,7" in lines


def test_system_monitor_ranges():
    monitor = SystemMonitor(random.Random(1))
    for _ in range(50):
        stats = monitor.system_stats()
        assert 0.0 <= stats.cpu_usage_percent <= 100.0
        assert stats.memory_total_mb == 8192
        assert 4096 <= stats.memory_used_mb < 4096 + 1024
        assert 150 <= stats.process_memory_mb < 200
        assert stats.process_id == os.getpid()


def test_benchmark_suite_counts(capsys):
    monitor = PerformanceMonitor()
    sleeps = []
    suite = BenchmarkSuite(monitor, sleep=sleeps.append, rng=random.Random(3))
    suite.run_all()
    assert monitor.stats("OCR_Fast_Mode").sample_count == 10
    assert monitor.stats("OCR_Documents_Processed").counter_value == 10
    assert monitor.stats("Frames_Captured").counter_value == 20
    assert monitor.stats("AI_Analyses_Completed").counter_value == 5
    assert monitor.stats("API_Requests_Served").counter_value == 50
    assert len(sleeps) == 10 * 2 + 20 + 5 + 50
    assert "Performance Report" in capsys.readouterr().out


def test_benchmark_sleep_ranges():
    monitor = PerformanceMonitor()
    sleeps = []
    BenchmarkSuite(monitor, sleep=sleeps.append).benchmark_web_interface()
    assert len(sleeps) == 50
    assert min(sleeps) >= 0.005
    assert max(sleeps) < 0.025
    assert monitor.stats("API_Requests_Served").counter_value == 50
    assert monitor.stats("Web_API_Request").sample_count == 50