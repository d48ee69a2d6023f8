"""Context manager for wall-clock measurement of a code section.

Usage:
    with trace("section title") as elapsed:
        your_code_here()

    print(elapsed.millis)

Debug log output:
    ts:    0.104 ┌ section title
    ts:  123.410 └ d:      123 ms

ts: time since start of the process (actually import time).
d : execution duration for the code wrapped by the context manager
"""
import time
import logging
import contextlib
import typing as typ

logger = logging.getLogger("aph.perflog")

proc_ts_start = time.monotonic() * 1000


class Elapsed:

    millis: int

    def __init__(self) -> None:
        self.millis = 0


@contextlib.contextmanager
def trace(name: str) -> typ.Iterator[Elapsed]:
    elapsed      = Elapsed()
    ts_start     = time.monotonic() * 1000
    rel_ts_start = ts_start - proc_ts_start
    logger.debug(f"ts:{rel_ts_start:9.3f} ┌ {name}")
    try:
        yield elapsed
    finally:
        ts_end     = time.monotonic() * 1000
        rel_ts_end = ts_end - proc_ts_start
        # truncated, the same as for the hash report
        elapsed.millis = int(ts_end - ts_start)
        logger.debug(f"ts:{rel_ts_end:9.3f} └ d: {elapsed.millis:8} ms")
