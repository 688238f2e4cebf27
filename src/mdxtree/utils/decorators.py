#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/utils/decorators.py
"""Timing helper for parse and serialize calls."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long a block took, only when DEBUG logging is enabled.

    Parameters
    ----------
    logger : logging.Logger
        Logger to report on
    operation : str
        Description used in the message, e.g. ``"Parsing (12034 chars)"``

    Examples
    --------
        >>> logger = logging.getLogger(__name__)
        >>> with debug_timer(logger, "Parsing"):
        ...     pass

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.3f}s")
    else:
        yield
