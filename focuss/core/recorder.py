from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from focuss import config
from focuss.core.clock import Clock, SystemClock, date_bucket, previous_bucket, truncate_ms
from focuss.core.history import SessionHistory
from focuss.core.models import ProfileState, SessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    record: SessionRecord
    reward: int
    streak: int


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def focused_minutes(start_at: datetime, end_at: datetime, minimum: int) -> int:
    elapsed_seconds = round_half_up((end_at - start_at).total_seconds())
    return max(minimum, round_half_up(elapsed_seconds / 60))


def advance_streak(profile: ProfileState, today: str) -> int:
    """Credits `today` to the streak at most once per calendar day."""
    if profile.last_session_day == today:
        return profile.streak
    if profile.last_session_day == previous_bucket(today):
        profile.streak += 1
    else:
        profile.streak = 1
    profile.last_session_day = today
    return profile.streak


class OutcomeRecorder:
    """Finalizes a session: appends one record and applies one profile mutation."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    def record_completion(
        self,
        history: SessionHistory,
        profile: ProfileState,
        started_at: datetime | None,
        length_seconds: int,
    ) -> Outcome:
        record = self._make_record(history, started_at, length_seconds, interrupted=False)
        reward = record.focused_minutes + config.COMPLETION_BONUS
        history.append(record)
        profile.points += reward
        streak = advance_streak(profile, date_bucket(record.end_at))
        logger.info(
            "Session %d completed: %d min, +%d points, streak %d",
            record.id, record.focused_minutes, reward, streak,
        )
        return Outcome(record=record, reward=reward, streak=streak)

    def record_interruption(
        self,
        history: SessionHistory,
        profile: ProfileState,
        started_at: datetime | None,
        length_seconds: int,
    ) -> Outcome:
        record = self._make_record(history, started_at, length_seconds, interrupted=True)
        reward = record.focused_minutes
        history.append(record)
        profile.points += reward
        logger.info("Session %d interrupted: %d min, +%d points", record.id, record.focused_minutes, reward)
        return Outcome(record=record, reward=reward, streak=profile.streak)

    def _make_record(
        self,
        history: SessionHistory,
        started_at: datetime | None,
        length_seconds: int,
        interrupted: bool,
    ) -> SessionRecord:
        end_at = truncate_ms(self._clock.now())
        if started_at is None:
            logger.warning(
                "Session start instant missing, assuming a full %d s session", length_seconds,
            )
            start_at = end_at - timedelta(seconds=length_seconds)
        else:
            start_at = min(truncate_ms(started_at), end_at)
        return SessionRecord(
            id=history.next_id(end_at),
            start_at=start_at,
            end_at=end_at,
            focused_minutes=focused_minutes(start_at, end_at, minimum=0 if interrupted else 1),
            interrupted=interrupted,
        )
