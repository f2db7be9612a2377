"""Frame timing state and interval helpers."""

from __future__ import annotations

from dataclasses import dataclass


def _modf(x: float, m: float) -> float:
    return x - int(x / m) * m


def on_interval(time: float, delta: float, interval: float, offset: float = 0.0) -> bool:
    """True if an interval boundary was crossed during the last ``delta`` seconds."""
    last = int((time - offset - delta) / interval)
    following = int((time - offset) / interval)
    return last < following


def on_time(time: float, timestamp: float, delta: float) -> bool:
    """True if ``timestamp`` was passed during the last ``delta`` seconds."""
    previous = time - delta
    return time >= timestamp and previous < timestamp


def between_interval(time: float, interval: float, offset: float = 0.0) -> bool:
    """True during every second interval-length span."""
    return _modf(time - offset, interval * 2.0) >= interval


@dataclass
class Clock:
    """Running game time: elapsed ticks and seconds, last frame delta, pause timer."""

    ticks: int = 0
    previous_ticks: int = 0
    seconds: float = 0.0
    previous_seconds: float = 0.0
    delta: float = 0.0
    pause_timer: float = 0.0

    def pause_for(self, duration: float) -> None:
        """Pause for ``duration`` unless a longer pause is already pending."""
        if duration >= self.pause_timer:
            self.pause_timer = duration

    def on_interval(self, interval: float, offset: float = 0.0) -> bool:
        """Interval check against the current time and delta."""
        return on_interval(self.seconds, self.delta, interval, offset)

    def on_time(self, time: float, timestamp: float) -> bool:
        """Timestamp check using the current delta."""
        return on_time(time, timestamp, self.delta)

    def between_interval(self, interval: float, offset: float = 0.0) -> bool:
        """Alternating-span check against the current time."""
        return between_interval(self.seconds, interval, offset)

    def reset(self) -> None:
        """Zero the elapsed time and delta; the pause timer is left as it is."""
        self.ticks = 0
        self.previous_ticks = 0
        self.seconds = 0.0
        self.previous_seconds = 0.0
        self.delta = 0.0