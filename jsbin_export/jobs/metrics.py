"""Metrics tracking for export progress."""
import time
import logging
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)


class Metrics:
    """Count downloaded items and time the run."""

    def __init__(self, total: int = 0):
        self.total = total
        self.start_time = time.monotonic()
        self.counters: Dict[str, int] = defaultdict(int)

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter."""
        self.counters[key] += amount

    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def report(self) -> None:
        """Log current progress."""
        downloaded = self.counters["downloaded"]
        logger.info(
            f"Progress: {downloaded}/{self.total} "
            f"({downloaded * 100 // self.total if self.total > 0 else 0}%) | "
            f"Elapsed: {self.elapsed():.1f}s"
        )

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        return {
            "total": self.total,
            "downloaded": self.counters["downloaded"],
            "elapsed_seconds": self.elapsed(),
        }
