from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from focuss import config
from focuss.core.clock import from_epoch_ms, to_epoch_ms


def coerce_int(value: Any, default: int = 0) -> int:
    """Приводит значение к int; при неудаче возвращает `default`."""
    if isinstance(value, bool):
        return int(value)
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


@dataclass(frozen=True)
class SessionRecord:
    id: int
    start_at: datetime
    end_at: datetime
    focused_minutes: int
    interrupted: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "startAt": to_epoch_ms(self.start_at),
            "endAt": to_epoch_ms(self.end_at),
            "focusedMinutes": self.focused_minutes,
            "interrupted": self.interrupted,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> SessionRecord:
        if not isinstance(raw, dict):
            raise ValueError(f"Session entry must be an object, got {type(raw).__name__}")
        try:
            start_at = from_epoch_ms(float(raw["startAt"]))
            end_at = from_epoch_ms(float(raw["endAt"]))
            record_id = int(raw["id"])
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise ValueError(f"Invalid session entry: {raw!r}") from exc
        if end_at < start_at:
            raise ValueError(f"Session {record_id} ends before it starts")
        interrupted = raw.get("interrupted", False)
        if not isinstance(interrupted, bool):
            raise ValueError(f"Session {record_id} has a non-boolean interrupted flag: {interrupted!r}")
        return cls(
            id=record_id,
            start_at=start_at,
            end_at=end_at,
            focused_minutes=max(0, coerce_int(raw.get("focusedMinutes"), 0)),
            interrupted=interrupted,
        )


@dataclass
class ProfileState:
    points: int = 0
    streak: int = 0
    last_session_day: str | None = None
    preferred_session_minutes: int = config.DEFAULT_SESSION_MINUTES
    name: str = ""
    daily_goal_minutes: int = config.DEFAULT_DAILY_GOAL_MINUTES
    onboarding_complete: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "dailyGoalMinutes": self.daily_goal_minutes,
            "onboardDone": self.onboarding_complete,
            "points": self.points,
            "streak": self.streak,
            "lastSessionDay": self.last_session_day,
            "sessionLengthMin": self.preferred_session_minutes,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ProfileState:
        """Восстанавливает профиль; некорректные числа заменяются значениями по умолчанию."""
        last_day = raw.get("lastSessionDay")
        preferred = coerce_int(raw.get("sessionLengthMin"), config.DEFAULT_SESSION_MINUTES)
        return cls(
            points=max(0, coerce_int(raw.get("points"), 0)),
            streak=max(0, coerce_int(raw.get("streak"), 0)),
            last_session_day=str(last_day) if last_day else None,
            preferred_session_minutes=preferred if preferred > 0 else config.DEFAULT_SESSION_MINUTES,
            name=str(raw.get("name") or ""),
            daily_goal_minutes=max(0, coerce_int(raw.get("dailyGoalMinutes"), config.DEFAULT_DAILY_GOAL_MINUTES)),
            onboarding_complete=bool(raw.get("onboardDone", False)),
        )


@dataclass(frozen=True)
class Suggestion:
    reason: str
    suggested_minutes: int


@dataclass(frozen=True)
class Stats:
    today_minutes: int
    week_minutes: int
    interrupted_count_7d: int
    session_count_7d: int
    interruption_rate_7d: float
    goal_progress_percent: int
