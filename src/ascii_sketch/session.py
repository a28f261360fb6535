"""
Supersedable background conversions.

An interactive front end re-runs the conversion on every image pick or
option change without waiting for the previous run. Each request is
tagged with a generation number; only the newest generation may publish
a result, older runs are cancelled at their next stage boundary or
dropped when they finish.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Tuple

from .config import ConversionConfig
from .errors import ConversionCancelled
from .image_to_ascii import convert_bytes

LOG = logging.getLogger(__name__)


class ConversionSession:
    """Runs conversions off the caller's thread, keeping only the latest result."""

    def __init__(
        self,
        convert: Callable[..., str] = convert_bytes,
        max_workers: int = 1,
        on_result: Optional[Callable[[int, str], None]] = None,
    ):
        self._convert = convert
        self._on_result = on_result
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="ascii-sketch"
        )
        self._lock = threading.RLock()
        self._generation = 0
        self._cancel: Optional[threading.Event] = None
        self.latest: Optional[Tuple[int, str]] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def submit(self, data: bytes, config: ConversionConfig) -> Future:
        """
        Schedule a conversion and supersede every earlier request.

        The returned future resolves to the art string, or to None when a
        newer request made this one obsolete.
        """
        cancel = threading.Event()
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._cancel is not None:
                self._cancel.set()
            self._cancel = cancel
        LOG.debug("Submitting conversion generation %d", generation)
        return self._executor.submit(self._run, generation, data, config, cancel)

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _run(self, generation, data, config, cancel) -> Optional[str]:
        if not self._is_current(generation):
            LOG.debug("Skipping superseded generation %d", generation)
            return None
        try:
            art = self._convert(data, config, cancel=cancel)
        except ConversionCancelled:
            LOG.debug("Generation %d cancelled", generation)
            return None
        except Exception:
            if not self._is_current(generation):
                LOG.debug("Dropping error of superseded generation %d", generation, exc_info=True)
                return None
            raise

        with self._lock:
            if generation != self._generation:
                LOG.debug("Discarding stale result of generation %d", generation)
                return None
            # callbacks fire in generation order; a failing callback publishes nothing
            if self._on_result is not None:
                self._on_result(generation, art)
            self.latest = (generation, art)
        return art

    def close(self, wait: bool = True) -> None:
        if not wait:
            with self._lock:
                if self._cancel is not None:
                    self._cancel.set()
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
