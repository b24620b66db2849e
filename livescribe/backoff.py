"""Reconnect backoff policy."""
from dataclasses import dataclass
from typing import Awaitable, Callable

from livescribe.constants import BACKOFF_BASE_SECONDS, BACKOFF_FACTOR, BACKOFF_MAX_SECONDS

Sleeper = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class BackoffPolicy:
    base_seconds: float = BACKOFF_BASE_SECONDS
    factor: float = BACKOFF_FACTOR
    max_seconds: float = BACKOFF_MAX_SECONDS

    def delay_for_attempt(self, attempt: int) -> float:
        """Attempt 1 → base, each further attempt multiplies by factor, capped at max."""
        delay = self.base_seconds * (self.factor ** max(0, attempt - 1))
        return min(delay, self.max_seconds)
