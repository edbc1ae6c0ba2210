"""Progress reporting for long frame renders."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from time import perf_counter


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    if total_seconds <= 0:
        return "<1s"
    minutes, seconds_remaining = divmod(total_seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h{minutes:02d}m{seconds_remaining:02d}s"
    if minutes:
        return f"{minutes}m{seconds_remaining:02d}s"
    return f"{seconds_remaining}s"


def eta_string(elapsed: float, completed: int, total: int) -> str:
    """Format an ETA string given elapsed time and progress counters."""
    if completed <= 0 or total <= 0 or completed > total or elapsed <= 0.0:
        return "ETA estimating"

    remaining = max(0.0, elapsed * (total - completed) / completed)
    finish_time = datetime.now() + timedelta(seconds=remaining)
    return f"ETA {format_duration(remaining)} (finish {finish_time.strftime('%H:%M:%S')})"


class ProgressReporter:
    """Log a progress line roughly every 5% of ``total`` steps."""

    def __init__(self, logger: logging.Logger, total: int, label: str) -> None:
        self.logger = logger
        self.total = total
        self.label = label
        self.interval = max(1, total // 20)
        self.completed = 0
        self._start = perf_counter()

    @property
    def elapsed(self) -> float:
        return perf_counter() - self._start

    def advance(self, steps: int = 1) -> None:
        self.completed += steps
        if self.completed % self.interval == 0 or self.completed == self.total:
            percent = (self.completed / self.total) * 100.0 if self.total else 100.0
            self.logger.info(
                "%s progress: %s/%s frames (%0.1f%%, %s)",
                self.label,
                self.completed,
                self.total,
                percent,
                eta_string(self.elapsed, self.completed, self.total),
            )


__all__ = ["ProgressReporter", "eta_string", "format_duration"]
