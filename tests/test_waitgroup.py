"""Tests for the WaitGroup join counter."""

import threading
import time

import pytest

from webpage_analyzer.core.waitgroup import WaitGroup


class TestWaitGroup:
    """Test counting and waiting."""

    def test_wait_on_empty_group_returns_immediately(self):
        wg = WaitGroup()
        assert wg.wait(timeout=0.1) is True
        assert wg.count == 0

    def test_add_and_done(self):
        wg = WaitGroup()
        wg.add(3)
        assert wg.count == 3
        wg.done()
        wg.done()
        assert wg.count == 1
        wg.done()
        assert wg.count == 0

    def test_negative_counter_raises(self):
        """Calling done() more times than add() is a programming error."""
        wg = WaitGroup()
        with pytest.raises(ValueError, match="negative"):
            wg.done()

    def test_wait_times_out_while_work_pending(self):
        wg = WaitGroup()
        wg.add(1)
        start = time.monotonic()
        assert wg.wait(timeout=0.05) is False
        assert time.monotonic() - start >= 0.04
        assert wg.count == 1

    def test_wait_blocks_until_all_threads_done(self):
        wg = WaitGroup()
        finished = []
        lock = threading.Lock()

        def work(i):
            try:
                time.sleep(0.01 * i)
                with lock:
                    finished.append(i)
            finally:
                wg.done()

        for i in range(5):
            wg.add(1)
            threading.Thread(target=work, args=(i,)).start()

        assert wg.wait(timeout=5) is True
        assert sorted(finished) == [0, 1, 2, 3, 4]

    def test_multiple_waiters_are_released(self):
        wg = WaitGroup()
        wg.add(1)
        results = []

        def waiter():
            results.append(wg.wait(timeout=5))

        waiters = [threading.Thread(target=waiter) for _ in range(3)]
        for t in waiters:
            t.start()

        wg.done()
        for t in waiters:
            t.join(timeout=5)

        assert results == [True, True, True]
