from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]


def get_clock() -> Clock:
    """Wall-clock source for the "last 7 days" and current-month windows."""
    return datetime.now
