"""Bounded, non-blocking read of piped standard input."""

import queue
import sys
import threading
from typing import TextIO


def probe_stdin(timeout: float, stream: TextIO | None = None) -> str | None:
    """Read all of stdin if it arrives within ``timeout`` seconds.

    The read happens on a daemon thread so an interactive terminal (or a
    writer that never closes the pipe) cannot block the caller.

    Args:
        timeout: Seconds to wait for end of input.
        stream: Stream to read, defaults to ``sys.stdin``.

    Returns:
        The text read, or None when nothing arrived in time.
    """
    source = stream if stream is not None else sys.stdin
    if source is None or source.closed:
        return None
    if source.isatty():
        return None

    results: queue.Queue[str] = queue.Queue(maxsize=1)

    def _read() -> None:
        try:
            results.put(source.read())
        except (OSError, ValueError):
            return

    reader = threading.Thread(target=_read, name="ccg-stdin-probe", daemon=True)
    reader.start()
    try:
        return results.get(timeout=timeout)
    except queue.Empty:
        return None
