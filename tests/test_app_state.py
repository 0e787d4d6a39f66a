import json

import pytest

from conftest import interrupt_after, run_session
from focuss import config
from focuss.core.app_state import AppState
from focuss.core.timer import TimerPhase
from focuss.data.export import ExportFormatError
from focuss.data.storage import Storage


def test_completed_session_persists_and_awards_points(state, scheduler, clock, storage) -> None:
    recorded = []
    state.session_recorded.connect(recorded.append)

    run_session(state, scheduler, clock, 25)

    assert len(recorded) == 1
    assert recorded[0].reward == 35
    assert state.profile.points == 35
    assert state.profile.streak == 1
    assert state.timer.phase == TimerPhase.IDLE
    assert state.timer.remaining_seconds == 25 * 60

    stored = storage.get(config.SESSIONS_KEY)
    assert len(stored) == 1
    assert stored[0]["focusedMinutes"] == 25
    assert stored[0]["interrupted"] is False
    assert storage.get(config.USER_KEY)["points"] == 35


def test_interrupt_after_three_minutes(state, clock) -> None:
    state.profile.last_session_day = "2026-03-09"
    state.profile.streak = 5

    interrupt_after(state, clock, 3)

    record = state.history.last
    assert record.focused_minutes == 3
    assert record.interrupted is True
    assert state.profile.points == 3
    assert state.profile.streak == 5
    assert state.profile.last_session_day == "2026-03-09"


def test_reload_restores_profile_and_history(state, scheduler, clock, storage) -> None:
    run_session(state, scheduler, clock, 25)
    interrupt_after(state, clock, 4)
    state.set_daily_goal("90")

    again = AppState(scheduler=scheduler, clock=clock)
    again.load_from_storage(storage)

    assert again.profile == state.profile
    assert again.history.records == state.history.records


def test_suggestion_appears_and_clears(state, clock) -> None:
    changes = []
    state.suggestion_changed.connect(changes.append)

    interrupt_after(state, clock, 5)
    interrupt_after(state, clock, 5)
    assert state.suggestion is None

    interrupt_after(state, clock, 5)
    assert state.suggestion is not None
    assert state.suggestion.suggested_minutes == 20
    assert changes[-1] == state.suggestion


def test_low_interruption_rate_clears_previous_suggestion(state, scheduler, clock) -> None:
    state.set_quick_test_mode(True)
    interrupt_after(state, clock, 0.5)
    interrupt_after(state, clock, 0.5)
    run_session(state, scheduler, clock, config.QUICK_TEST_MINUTES)
    assert state.suggestion is not None

    for _ in range(3):
        run_session(state, scheduler, clock, config.QUICK_TEST_MINUTES)
    # window now holds 2 interrupted of 6: 33%
    assert state.suggestion is None


def test_apply_suggestion_updates_preferred_length(state, clock, storage) -> None:
    for _ in range(3):
        interrupt_after(state, clock, 2)

    assert state.apply_suggestion() is True

    assert state.suggestion is None
    assert state.profile.preferred_session_minutes == 20
    assert state.timer.remaining_seconds == 20 * 60
    assert storage.get(config.USER_KEY)["sessionLengthMin"] == 20
    assert state.apply_suggestion() is False


def test_dismiss_suggestion_keeps_profile(state, clock) -> None:
    for _ in range(3):
        interrupt_after(state, clock, 2)

    state.dismiss_suggestion()

    assert state.suggestion is None
    assert state.profile.preferred_session_minutes == config.DEFAULT_SESSION_MINUTES


def test_cancellation_with_nothing_running(state, scheduler) -> None:
    assert state.pause() is False
    state.reset_timer()
    assert state.interrupt() is False
    assert state.timer.phase == TimerPhase.IDLE
    assert len(state.history) == 0
    assert not scheduler.is_armed


def test_toggle_starts_and_pauses(state, scheduler) -> None:
    assert state.toggle() is True
    assert state.timer.phase == TimerPhase.RUNNING
    assert state.toggle() is True
    assert state.timer.phase == TimerPhase.PAUSED
    assert not scheduler.is_armed


def test_invalid_inputs_are_coerced(state) -> None:
    state.set_daily_goal("abc")
    assert state.profile.daily_goal_minutes == 0

    state.set_preferred_minutes(30)
    state.set_preferred_minutes("soon")
    state.set_preferred_minutes(-5)
    assert state.profile.preferred_session_minutes == 30
    assert state.timer.remaining_seconds == 30 * 60


def test_complete_onboarding(state, storage) -> None:
    state.complete_onboarding("  Ana ", "45", preferred_minutes=15)

    user = storage.get(config.USER_KEY)
    assert user["name"] == "Ana"
    assert user["dailyGoalMinutes"] == 45
    assert user["onboardDone"] is True
    assert user["sessionLengthMin"] == 15
    assert state.timer.remaining_seconds == 15 * 60


def test_stats_follow_history(state, scheduler, clock) -> None:
    run_session(state, scheduler, clock, 25)
    interrupt_after(state, clock, 5)

    stats = state.stats()

    assert stats.today_minutes == 30
    assert stats.week_minutes == 30
    assert stats.interruption_rate_7d == 0.5
    assert stats.goal_progress_percent == 50


def test_export_import_round_trip(state, scheduler, clock, storage, tmp_path) -> None:
    run_session(state, scheduler, clock, 25)
    interrupt_after(state, clock, 7)
    state.complete_onboarding("Ana", 45)
    payload = state.export_json()
    document = json.loads(payload)
    assert set(document) == {"sessions", "user", "exportedAt"}

    other_storage = Storage(tmp_path / "other.db")
    other_storage.init_db()
    other = AppState(scheduler=scheduler, clock=clock)
    other.load_from_storage(other_storage)
    other.import_document(payload)

    assert other.history.records == state.history.records
    assert other.profile == state.profile
    assert other_storage.get(config.SESSIONS_KEY) == storage.get(config.SESSIONS_KEY)


def test_import_rejects_malformed_document(state, scheduler, clock) -> None:
    run_session(state, scheduler, clock, 25)
    before = state.history.records

    with pytest.raises(ExportFormatError):
        state.import_document("{not json")
    with pytest.raises(ExportFormatError):
        state.import_document({"sessions": [{"id": 1}], "user": {}})

    assert state.history.records == before


def test_import_rejects_undecodable_and_deeply_nested_json(state, scheduler, clock) -> None:
    run_session(state, scheduler, clock, 25)
    before = state.history.records
    profile_before = state.profile

    with pytest.raises(ExportFormatError):
        state.import_document(b"\xff\xfe{not json")
    with pytest.raises(ExportFormatError):
        state.import_document("[" * 200_000 + "]" * 200_000)

    assert state.history.records == before
    assert state.profile == profile_before


def test_import_rejects_non_boolean_interrupted_flag(state, scheduler, clock) -> None:
    run_session(state, scheduler, clock, 25)
    document = json.loads(state.export_json())
    document["sessions"][0]["interrupted"] = "false"

    with pytest.raises(ExportFormatError):
        state.import_document(document)
    assert state.history.last.interrupted is False


def test_session_recorded_fires_after_state_is_updated(state, clock) -> None:
    seen: list[str] = []
    at_recorded: dict = {}
    state.profile_changed.connect(lambda _profile: seen.append("profile"))
    state.suggestion_changed.connect(lambda _suggestion: seen.append("suggestion"))

    def on_recorded(outcome) -> None:
        seen.append("recorded")
        at_recorded["last"] = state.history.last
        at_recorded["points"] = state.profile.points
        at_recorded["outcome"] = outcome

    state.session_recorded.connect(on_recorded)
    interrupt_after(state, clock, 3)

    assert seen == ["profile", "suggestion", "recorded"]
    assert at_recorded["last"] == at_recorded["outcome"].record
    assert at_recorded["points"] == 3


def test_reset_all_clears_everything(state, scheduler, clock, storage) -> None:
    run_session(state, scheduler, clock, 25)
    state.set_quick_test_mode(True)
    state.set_preferred_minutes(15)
    state.start()

    state.reset_all()

    assert storage.get(config.USER_KEY) is None
    assert storage.get(config.SESSIONS_KEY) is None
    assert len(state.history) == 0
    assert state.profile.points == 0
    assert state.profile.streak == 0
    assert state.profile.last_session_day is None
    assert state.profile.preferred_session_minutes == config.DEFAULT_SESSION_MINUTES
    assert state.suggestion is None
    assert state.timer.phase == TimerPhase.IDLE
    assert state.timer.quick_test_mode is False
    assert state.timer.remaining_seconds == config.DEFAULT_SESSION_MINUTES * 60
    assert not scheduler.is_armed


def test_storage_failure_keeps_memory_authoritative(scheduler, clock, tmp_path) -> None:
    broken = Storage(tmp_path / "never-initialised.db")
    app_state = AppState(scheduler=scheduler, clock=clock)
    app_state.load_from_storage(broken)

    run_session(app_state, scheduler, clock, 25)

    assert app_state.profile.points == 35
    assert len(app_state.history) == 1
