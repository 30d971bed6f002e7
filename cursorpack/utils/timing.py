"""
Timing for package exports.

PackageBuilder.build wraps collection, zip serialization and the file
write in one Timer and reports the result in its "Package written" log.
"""

import time
from typing import Optional


class Timer:
    """Context manager measuring one export step."""

    def __init__(self, name: str = ""):
        """
        Initialize timer.

        Args:
            name: Label shown in the log line, e.g. "export"
        """
        self.name = name
        self.start_time: Optional[float] = None
        self.elapsed: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        if self.start_time is not None:
            self.elapsed = time.perf_counter() - self.start_time

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed * 1000

    def __str__(self) -> str:
        name_str = f"{self.name}: " if self.name else ""
        return f"{name_str}{self.elapsed_ms:.2f}ms"
