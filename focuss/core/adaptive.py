from __future__ import annotations

from collections.abc import Sequence

from focuss import config
from focuss.core.models import SessionRecord, Suggestion
from focuss.core.recorder import round_half_up


def evaluate_suggestion(records: Sequence[SessionRecord], preferred_minutes: int) -> Suggestion | None:
    """Proposes shorter sessions when the trailing window is interruption-heavy.

    The window is the last `ADAPTIVE_WINDOW` records by insertion order, not a
    time range. Returns None when the rule does not fire so callers replace any
    previous suggestion instead of keeping it.
    """
    window = list(records[-config.ADAPTIVE_WINDOW:]) if config.ADAPTIVE_WINDOW > 0 else []
    if len(window) < config.ADAPTIVE_MIN_SESSIONS:
        return None

    interrupted = sum(1 for record in window if record.interrupted)
    rate = interrupted / len(window)
    if rate < config.ADAPTIVE_RATE_THRESHOLD:
        return None

    suggested = max(config.ADAPTIVE_FLOOR_MINUTES, preferred_minutes - config.ADAPTIVE_STEP_MINUTES)
    return Suggestion(
        reason=f"High interrupt rate ({round_half_up(rate * 100)}%) in last {len(window)} sessions",
        suggested_minutes=suggested,
    )
