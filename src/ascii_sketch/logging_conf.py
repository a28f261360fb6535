"""Logging setup shared by the ascii-sketch commands."""

import logging
import sys

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG = logging.getLogger("ascii_sketch")


def setup_logging(level: str = "WARNING", log_path: str | None = None) -> None:
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    LOG.setLevel(logging.DEBUG if log_path else numeric_level)

    handlers: list[logging.Handler] = []

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(numeric_level)
    sh.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handlers.append(sh)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        handlers.append(fh)

    for old in LOG.handlers:
        old.close()
    LOG.handlers[:] = handlers
    LOG.propagate = False  # prevent double logging via root logger
