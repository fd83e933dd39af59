"""Epoch-millisecond clock shared by ids, timestamps and upload keys."""

import time


def now_ms() -> int:
    return int(time.time() * 1000)
