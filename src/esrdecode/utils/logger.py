from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO


def setup_logging(level: str = "WARNING", quiet: bool = False, stream: Optional[TextIO] = None) -> None:
    """Route all log records to one handler; stderr unless a stream is given."""
    root = logging.getLogger()
    root.handlers.clear()

    lvl = getattr(logging, level.upper(), logging.WARNING)
    root.setLevel(lvl)

    # stdout is reserved for the decoded tree
    ch = logging.StreamHandler(stream if stream is not None else sys.stderr)
    ch.setLevel(lvl)
    fmt = "[%(levelname)s] %(name)s: %(message)s" if not quiet else "%(message)s"
    ch.setFormatter(logging.Formatter(fmt))
    root.addHandler(ch)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
