"""Tests for throttled progress output."""

import io
import time

from dusk.progress import ThrottledWriter


def wait_until_fired(writer, calls, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not calls and time.monotonic() < deadline:
        writer.throttled(calls.append)
        time.sleep(0.005)


class TestThrottledWriter:
    def test_inert_without_output(self):
        calls = []
        with ThrottledWriter(None, 0.001, initial_delay=0) as writer:
            assert writer._thread is None
            time.sleep(0.02)
            writer.throttled(calls.append)
            writer.unthrottled(calls.append)
        assert calls == []

    def test_nothing_before_initial_delay(self):
        calls = []
        with ThrottledWriter(io.StringIO(), 0.001, initial_delay=60) as writer:
            writer.throttled(calls.append)
        assert calls == []

    def test_fires_after_initial_delay(self):
        out = io.StringIO()
        calls = []
        with ThrottledWriter(out, 0.01, initial_delay=0) as writer:
            wait_until_fired(writer, calls)
        assert calls == [out]

    def test_fires_once_per_interval(self):
        calls = []
        with ThrottledWriter(io.StringIO(), 60, initial_delay=0) as writer:
            wait_until_fired(writer, calls)
            writer.throttled(calls.append)
            writer.throttled(calls.append)
        assert len(calls) == 1

    def test_unthrottled_always_fires_with_output(self):
        out = io.StringIO()
        with ThrottledWriter(out, 60, initial_delay=60) as writer:
            writer.unthrottled(lambda o: o.write("\x1b[2K\r"))
        assert out.getvalue() == "\x1b[2K\r"

    def test_close_stops_timer_thread(self):
        writer = ThrottledWriter(io.StringIO(), 60, initial_delay=60)
        thread = writer._thread
        assert thread.is_alive()

        started = time.monotonic()
        writer.close()
        assert not thread.is_alive()
        assert time.monotonic() - started < 5

    def test_close_twice_is_harmless(self):
        writer = ThrottledWriter(io.StringIO(), 0.01)
        writer.close()
        writer.close()
