from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Local wall clock."""

    def now(self) -> datetime:
        return datetime.now()


def date_bucket(instant: datetime) -> str:
    return instant.date().isoformat()


def previous_bucket(bucket: str) -> str:
    return (date.fromisoformat(bucket) - timedelta(days=1)).isoformat()


def truncate_ms(instant: datetime) -> datetime:
    """Drops sub-millisecond precision so instants survive epoch-ms encoding."""
    return instant.replace(microsecond=instant.microsecond // 1000 * 1000)


def to_epoch_ms(instant: datetime) -> int:
    return int(round(instant.timestamp() * 1000))


def from_epoch_ms(value: int | float) -> datetime:
    return datetime.fromtimestamp(value / 1000)


def format_remaining(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"
