import threading

import pytest

from workstudy.thread_pool import ThreadPool


def test_submit_returns_results():
    with ThreadPool(4) as pool:
        futures = [pool.submit(pow, n, 2) for n in range(10)]
        assert [f.result(timeout=5) for f in futures] == [n * n for n in range(10)]


def test_keyword_arguments_are_passed():
    with ThreadPool(2) as pool:
        future = pool.submit(sorted, [3, 1, 2], reverse=True)
        assert future.result(timeout=5) == [3, 2, 1]


def test_exception_reaches_future():
    with ThreadPool(1) as pool:
        future = pool.submit(int, "not a number")
        with pytest.raises(ValueError):
            future.result(timeout=5)


def test_submit_after_shutdown_raises():
    pool = ThreadPool(1)
    pool.shutdown()
    with pytest.raises(RuntimeError):
        pool.submit(len, [])


def test_shutdown_drains_queued_tasks():
    pool = ThreadPool(1)
    gate = threading.Event()
    done = []
    pool.submit(gate.wait, 5)
    for n in range(5):
        pool.submit(done.append, n)
    threading.Timer(0.05, gate.set).start()
    pool.shutdown()
    assert done == [0, 1, 2, 3, 4]


def test_tasks_run_concurrently():
    barrier = threading.Barrier(3, timeout=5)
    with ThreadPool(3) as pool:
        futures = [pool.submit(barrier.wait) for _ in range(3)]
        assert sorted(f.result(timeout=5) for f in futures) == [0, 1, 2]


def test_zero_threads_rejected():
    with pytest.raises(ValueError):
        ThreadPool(0)


def test_size_reports_worker_count():
    with ThreadPool(3) as pool:
        assert pool.size == 3