from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from focuss import config
from focuss.core.clock import date_bucket
from focuss.core.models import SessionRecord, Stats
from focuss.core.recorder import round_half_up


def compute_stats(records: Iterable[SessionRecord], now: datetime, daily_goal_minutes: int) -> Stats:
    """Aggregates over the full history; nothing is cached between calls."""
    today = date_bucket(now)
    window_start = now - timedelta(days=config.STATS_WINDOW_DAYS)

    today_minutes = 0
    week_minutes = 0
    week_total = 0
    week_interrupted = 0
    for record in records:
        if date_bucket(record.end_at) == today:
            today_minutes += record.focused_minutes
        if record.end_at >= window_start:
            week_minutes += record.focused_minutes
            week_total += 1
            if record.interrupted:
                week_interrupted += 1

    rate = week_interrupted / week_total if week_total else 0.0
    goal = daily_goal_minutes if daily_goal_minutes > 0 else 1
    progress = max(0, min(100, round_half_up(today_minutes / goal * 100)))
    return Stats(
        today_minutes=today_minutes,
        week_minutes=week_minutes,
        interrupted_count_7d=week_interrupted,
        session_count_7d=week_total,
        interruption_rate_7d=rate,
        goal_progress_percent=progress,
    )
