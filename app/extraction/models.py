from dataclasses import dataclass


@dataclass(frozen=True)
class PollPolicy:
    """Bounds for polling an asynchronous extraction job."""

    interval_seconds: float = 1.0
    backoff_factor: float = 1.0
    max_interval_seconds: float = 10.0
    max_attempts: int = 120
    timeout_seconds: float = 300.0

    def next_interval(self, current: float) -> float:
        """Interval to wait after `current`, capped at max_interval_seconds."""
        return min(current * self.backoff_factor, self.max_interval_seconds)
