"""Tests for session module."""

import io
import threading

import pytest
from PIL import Image
from ascii_sketch.config import ConversionConfig
from ascii_sketch.errors import ConversionCancelled, DecodeError
from ascii_sketch.image_to_ascii import convert_bytes
from ascii_sketch.session import ConversionSession

TIMEOUT = 10

# --- Fixtures ---


@pytest.fixture
def config():
    return ConversionConfig(width=40)


@pytest.fixture
def png():
    buf = io.BytesIO()
    Image.new("RGB", (80, 40), "gray").save(buf, format="PNG")
    return buf.getvalue()


class SlowConverter:
    """Blocks on b"slow" payloads until released; everything else returns at once."""

    def __init__(self, honor_cancel=False, fail_slow=False):
        self.started = threading.Event()
        self.release = threading.Event()
        self.honor_cancel = honor_cancel
        self.fail_slow = fail_slow
        self.tokens = []

    def __call__(self, data, config, cancel=None):
        self.tokens.append(cancel)
        if data == b"slow":
            self.started.set()
            self.release.wait(TIMEOUT)
            if self.honor_cancel and cancel.is_set():
                raise ConversionCancelled()
            if self.fail_slow:
                raise DecodeError("slow payload failed")
        return data.decode()


# --- Tests ---


class TestConversionSession:
    def test_real_conversion(self, png, config):
        results = []
        with ConversionSession(on_result=lambda g, a: results.append((g, a))) as session:
            art = session.submit(png, config).result(TIMEOUT)

        assert art == convert_bytes(png, config)
        assert session.latest == (1, art)
        assert results == [(1, art)]

    def test_generation_increments(self, config):
        with ConversionSession(convert=SlowConverter()) as session:
            assert session.generation == 0
            session.submit(b"a", config).result(TIMEOUT)
            session.submit(b"b", config).result(TIMEOUT)
            assert session.generation == 2

    def test_stale_result_discarded(self, config):
        convert = SlowConverter()
        results = []
        session = ConversionSession(
            convert=convert, max_workers=2, on_result=lambda g, a: results.append((g, a))
        )
        try:
            slow = session.submit(b"slow", config)
            assert convert.started.wait(TIMEOUT)
            fast = session.submit(b"fast", config)
            assert fast.result(TIMEOUT) == "fast"

            convert.release.set()
            assert slow.result(TIMEOUT) is None
            assert session.latest == (2, "fast")
            assert results == [(2, "fast")]
        finally:
            convert.release.set()
            session.close()

    def test_queued_request_skipped(self, config):
        convert = SlowConverter()
        session = ConversionSession(convert=convert, max_workers=1)
        try:
            first = session.submit(b"slow", config)
            assert convert.started.wait(TIMEOUT)
            second = session.submit(b"second", config)
            third = session.submit(b"third", config)
            convert.release.set()

            assert first.result(TIMEOUT) is None
            assert second.result(TIMEOUT) is None
            assert third.result(TIMEOUT) == "third"
            # the skipped request never reached the converter
            assert len(convert.tokens) == 2
        finally:
            convert.release.set()
            session.close()

    def test_superseded_run_is_cancelled(self, config):
        convert = SlowConverter(honor_cancel=True)
        session = ConversionSession(convert=convert, max_workers=2)
        try:
            slow = session.submit(b"slow", config)
            assert convert.started.wait(TIMEOUT)
            session.submit(b"fast", config).result(TIMEOUT)
            assert convert.tokens[0].is_set()
            assert not convert.tokens[1].is_set()
            convert.release.set()
            assert slow.result(TIMEOUT) is None
        finally:
            convert.release.set()
            session.close()

    def test_error_of_latest_propagates(self, config):
        with ConversionSession() as session:
            future = session.submit(b"not an image", config)
            with pytest.raises(DecodeError):
                future.result(TIMEOUT)
        assert session.latest is None

    def test_error_of_superseded_dropped(self, config):
        convert = SlowConverter(fail_slow=True)
        session = ConversionSession(convert=convert, max_workers=2)
        try:
            slow = session.submit(b"slow", config)
            assert convert.started.wait(TIMEOUT)
            session.submit(b"fast", config).result(TIMEOUT)
            convert.release.set()
            assert slow.result(TIMEOUT) is None
            assert session.latest == (2, "fast")
        finally:
            convert.release.set()
            session.close()

    def test_failing_callback_publishes_nothing(self, config):
        def on_result(generation, art):
            raise RuntimeError("display gone")

        with ConversionSession(convert=SlowConverter(), on_result=on_result) as session:
            future = session.submit(b"x", config)
            with pytest.raises(RuntimeError):
                future.result(TIMEOUT)
        assert session.latest is None

    def test_close_without_wait_drops_queued_work(self, config):
        convert = SlowConverter()
        session = ConversionSession(convert=convert, max_workers=1)
        try:
            slow = session.submit(b"slow", config)
            assert convert.started.wait(TIMEOUT)
            queued = session.submit(b"queued", config)

            session.close(wait=False)
            assert queued.cancelled()
            convert.release.set()
            assert slow.result(TIMEOUT) is None
            assert len(convert.tokens) == 1
        finally:
            convert.release.set()
            session.close()
