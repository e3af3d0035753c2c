"""Kernel time – the clock used to stamp scroll-cursor expirations.

Scroll cursors store their expiry as epoch milliseconds, so ``epoch_millis``
is the method everything calls; ``now`` exists for log and test readability.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class Clock(Protocol):
    """Port: source of the current instant."""

    def now(self) -> datetime: ...
    def epoch_millis(self) -> int: ...


class SystemClock:
    """Wall clock, UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def epoch_millis(self) -> int:
        return _to_millis(self.now())


class FrozenClock:
    """Clock that only moves when told to, for deterministic cursor expirations."""

    def __init__(self, fixed: datetime) -> None:
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=UTC)
        self._fixed = fixed

    @classmethod
    def at_epoch_millis(cls, millis: int) -> "FrozenClock":
        return cls(datetime.fromtimestamp(millis / 1000, tz=UTC))

    def now(self) -> datetime:
        return self._fixed

    def epoch_millis(self) -> int:
        return _to_millis(self._fixed)

    def advance(self, **kwargs: int | float) -> None:
        """Move forward by ``timedelta(**kwargs)``, e.g. ``advance(minutes=5)``."""
        self._fixed += timedelta(**kwargs)


__all__ = ["Clock", "FrozenClock", "SystemClock"]
