"""
Clock helpers - wall-clock time in epoch milliseconds
"""

import time


def now_millis() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)
