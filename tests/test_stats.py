from datetime import datetime, timedelta

from focuss.core.models import SessionRecord
from focuss.core.stats import compute_stats


NOW = datetime(2026, 3, 10, 18, 0, 0)


def _record(end_at: datetime, minutes: int, interrupted: bool = False, record_id: int = 1) -> SessionRecord:
    return SessionRecord(
        id=record_id,
        start_at=end_at - timedelta(minutes=minutes),
        end_at=end_at,
        focused_minutes=minutes,
        interrupted=interrupted,
    )


def test_empty_history() -> None:
    stats = compute_stats([], NOW, 60)
    assert stats.today_minutes == 0
    assert stats.week_minutes == 0
    assert stats.interruption_rate_7d == 0.0
    assert stats.goal_progress_percent == 0


def test_today_and_week_windows() -> None:
    records = [
        _record(NOW - timedelta(days=8), 50, record_id=1),
        _record(NOW - timedelta(days=6, hours=23), 20, interrupted=True, record_id=2),
        _record(NOW - timedelta(days=1), 25, record_id=3),
        _record(NOW.replace(hour=0, minute=30), 15, record_id=4),
        _record(NOW - timedelta(hours=1), 10, interrupted=True, record_id=5),
    ]

    stats = compute_stats(records, NOW, 60)

    assert stats.today_minutes == 25
    assert stats.week_minutes == 70
    assert stats.session_count_7d == 4
    assert stats.interrupted_count_7d == 2
    assert stats.interruption_rate_7d == 0.5
    assert stats.goal_progress_percent == 42


def test_goal_progress_is_clamped() -> None:
    records = [_record(NOW - timedelta(hours=1), 90)]
    assert compute_stats(records, NOW, 60).goal_progress_percent == 100


def test_zero_goal_uses_one_minute_denominator() -> None:
    assert compute_stats([], NOW, 0).goal_progress_percent == 0
    records = [_record(NOW - timedelta(hours=1), 1)]
    assert compute_stats(records, NOW, 0).goal_progress_percent == 100
