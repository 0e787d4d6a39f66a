from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal

from focuss import config
from focuss.core.adaptive import evaluate_suggestion
from focuss.core.clock import Clock, SystemClock, truncate_ms
from focuss.core.history import SessionHistory
from focuss.core.models import ProfileState, SessionRecord, Stats, Suggestion, coerce_int
from focuss.core.recorder import Outcome, OutcomeRecorder
from focuss.core.scheduler import QtTickScheduler, TickScheduler
from focuss.core.stats import compute_stats
from focuss.core.timer import FocusTimer, TimerPhase, TimerSnapshot
from focuss.data import export
from focuss.data.storage import Storage

logger = logging.getLogger(__name__)


class AppState(QObject):
    """State container for one running instance: profile, history, timer and suggestion."""

    state_changed = pyqtSignal()
    timer_changed = pyqtSignal(object)
    session_recorded = pyqtSignal(object)
    profile_changed = pyqtSignal(object)
    suggestion_changed = pyqtSignal(object)

    def __init__(
        self,
        scheduler: TickScheduler | None = None,
        clock: Clock | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock = clock or SystemClock()
        self._storage: Storage | None = None
        self._recorder = OutcomeRecorder(self._clock)
        self.profile = ProfileState()
        self.history = SessionHistory()
        self.suggestion: Suggestion | None = None
        self.timer = FocusTimer(
            scheduler if scheduler is not None else QtTickScheduler(parent=self),
            clock=self._clock,
            length_seconds=self.profile.preferred_session_minutes * 60,
            on_finished=self._on_session_finished,
            on_interrupted=self._on_session_interrupted,
            on_tick=self._on_tick,
        )

    def load_from_storage(self, storage: Storage) -> None:
        self._storage = storage
        raw_user = storage.get(config.USER_KEY, None)
        self.profile = ProfileState.from_dict(raw_user) if isinstance(raw_user, dict) else ProfileState()

        raw_sessions = storage.get(config.SESSIONS_KEY, [])
        records: list[SessionRecord] = []
        if isinstance(raw_sessions, list):
            for entry in raw_sessions:
                try:
                    records.append(SessionRecord.from_dict(entry))
                except ValueError as exc:
                    logger.warning("Skipping stored session: %s", exc)
        self.history.replace(records)
        self.suggestion = None
        self.timer.reset()
        self.timer.configure(self.profile.preferred_session_minutes * 60)
        logger.info("Loaded profile with %d points and %d sessions", self.profile.points, len(self.history))
        self._emit_all()

    # Timer commands

    def start(self) -> bool:
        started = self.timer.start()
        if started:
            self._emit_timer()
        return started

    def pause(self) -> bool:
        paused = self.timer.pause()
        if paused:
            self._emit_timer()
        return paused

    def toggle(self) -> bool:
        if self.timer.phase == TimerPhase.RUNNING:
            return self.pause()
        return self.start()

    def reset_timer(self) -> None:
        self.timer.reset()
        self._emit_timer()

    def interrupt(self) -> bool:
        interrupted = self.timer.interrupt()
        if interrupted:
            self._emit_timer()
        return interrupted

    # Profile settings

    def set_preferred_minutes(self, minutes: Any) -> None:
        value = coerce_int(minutes, self.profile.preferred_session_minutes)
        if value <= 0:
            value = self.profile.preferred_session_minutes
        self.profile.preferred_session_minutes = value
        self.timer.configure(value * 60)
        self._persist_profile()
        self.profile_changed.emit(self.profile)
        self._emit_timer()

    def set_quick_test_mode(self, enabled: bool) -> None:
        self.timer.set_quick_test_mode(enabled)
        logger.info("Quick test mode %s", "on" if enabled else "off")
        self._emit_timer()

    def set_daily_goal(self, minutes: Any) -> None:
        self.profile.daily_goal_minutes = max(0, coerce_int(minutes, 0))
        self._persist_profile()
        self.profile_changed.emit(self.profile)
        self.state_changed.emit()

    def complete_onboarding(self, name: str, daily_goal_minutes: Any, preferred_minutes: Any = None) -> None:
        self.profile.name = name.strip()
        self.profile.daily_goal_minutes = max(0, coerce_int(daily_goal_minutes, 0))
        self.profile.onboarding_complete = True
        if preferred_minutes is not None:
            self.set_preferred_minutes(preferred_minutes)
        self._persist_profile()
        self.profile_changed.emit(self.profile)
        self.state_changed.emit()

    # Derived data

    def stats(self, now: datetime | None = None) -> Stats:
        return compute_stats(self.history, now or self._clock.now(), self.profile.daily_goal_minutes)

    def apply_suggestion(self) -> bool:
        if self.suggestion is None:
            return False
        minutes = self.suggestion.suggested_minutes
        self.suggestion = None
        self.profile.preferred_session_minutes = minutes
        self.timer.configure(minutes * 60)
        self._persist_profile()
        logger.info("Applied suggestion: session length %d min", minutes)
        self.suggestion_changed.emit(None)
        self.profile_changed.emit(self.profile)
        self._emit_timer()
        return True

    def dismiss_suggestion(self) -> None:
        if self.suggestion is None:
            return
        self.suggestion = None
        self.suggestion_changed.emit(None)
        self.state_changed.emit()

    # Export, import, reset

    def export_document(self) -> dict[str, Any]:
        return export.build_export_document(list(self.history), self.profile, truncate_ms(self._clock.now()))

    def export_json(self) -> str:
        return export.dumps(self.export_document())

    def import_document(self, document: Any) -> None:
        """Заменяет историю и профиль данными из экспорта; при ошибке состояние не меняется."""
        bundle = export.parse_export_document(document)
        self.timer.reset()
        self.history.replace(bundle.records)
        self.profile = bundle.profile
        self.suggestion = None
        self.timer.configure(self.profile.preferred_session_minutes * 60)
        self._persist_history()
        self._persist_profile()
        logger.info("Imported %d sessions", len(self.history))
        self._emit_all()

    def reset_all(self) -> None:
        self.timer.reset()
        if self._storage:
            self._storage.remove(config.SESSIONS_KEY)
            self._storage.remove(config.USER_KEY)
        self.history.clear()
        self.profile = ProfileState()
        self.suggestion = None
        self.timer.set_quick_test_mode(False)
        self.timer.configure(self.profile.preferred_session_minutes * 60)
        logger.info("Local data cleared")
        self._emit_all()

    # Outcome handling

    def _on_session_finished(self, started_at: datetime | None, length_seconds: int) -> None:
        outcome = self._recorder.record_completion(self.history, self.profile, started_at, length_seconds)
        self._after_outcome(outcome)

    def _on_session_interrupted(self, started_at: datetime | None, length_seconds: int) -> None:
        outcome = self._recorder.record_interruption(self.history, self.profile, started_at, length_seconds)
        self._after_outcome(outcome)

    def _after_outcome(self, outcome: Outcome) -> None:
        self._persist_history()
        self._persist_profile()
        self.suggestion = evaluate_suggestion(self.history.records, self.profile.preferred_session_minutes)
        self.profile_changed.emit(self.profile)
        self.suggestion_changed.emit(self.suggestion)
        self.state_changed.emit()
        self.session_recorded.emit(outcome)

    def _on_tick(self, snapshot: TimerSnapshot) -> None:
        self.timer_changed.emit(snapshot)

    def _persist_profile(self) -> None:
        if self._storage:
            self._storage.set(config.USER_KEY, self.profile.to_dict())

    def _persist_history(self) -> None:
        if self._storage:
            self._storage.set(config.SESSIONS_KEY, self.history.to_payload())

    def _emit_timer(self) -> None:
        self.timer_changed.emit(self.timer.snapshot())
        self.state_changed.emit()

    def _emit_all(self) -> None:
        self.profile_changed.emit(self.profile)
        self.suggestion_changed.emit(self.suggestion)
        self._emit_timer()
