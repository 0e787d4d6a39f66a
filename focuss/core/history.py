from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime

from focuss.core.clock import to_epoch_ms
from focuss.core.models import SessionRecord


class SessionHistory:
    """Append-only, insertion-ordered log of finished sessions."""

    def __init__(self, records: Iterable[SessionRecord] = ()) -> None:
        self._records: list[SessionRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SessionRecord]:
        return iter(self._records)

    @property
    def records(self) -> tuple[SessionRecord, ...]:
        return tuple(self._records)

    @property
    def last(self) -> SessionRecord | None:
        return self._records[-1] if self._records else None

    def next_id(self, now: datetime) -> int:
        """Time-derived id, bumped past the last one when the clock stalls."""
        candidate = to_epoch_ms(now)
        last = self.last
        if last is not None and candidate <= last.id:
            return last.id + 1
        return candidate

    def append(self, record: SessionRecord) -> None:
        self._records.append(record)

    def replace(self, records: Iterable[SessionRecord]) -> None:
        self._records = list(records)

    def clear(self) -> None:
        self._records.clear()

    def to_payload(self) -> list[dict]:
        return [record.to_dict() for record in self._records]
