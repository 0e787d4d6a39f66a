from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QButtonGroup,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from focuss import config
from focuss.core.app_state import AppState
from focuss.core.clock import format_remaining
from focuss.core.models import ProfileState, Suggestion
from focuss.core.recorder import Outcome
from focuss.core.timer import TimerPhase, TimerSnapshot
from focuss.data.export import EXPORT_FILENAME, ExportFormatError

logger = logging.getLogger(__name__)


def _card(object_name: str = "Card") -> tuple[QFrame, QVBoxLayout]:
    frame = QFrame()
    frame.setObjectName(object_name)
    layout = QVBoxLayout(frame)
    layout.setContentsMargins(14, 14, 14, 14)
    return frame, layout


def _title(text: str) -> QLabel:
    label = QLabel(text)
    label.setObjectName("CardTitle")
    return label


def _muted(text: str = "") -> QLabel:
    label = QLabel(text)
    label.setObjectName("MutedText")
    label.setWordWrap(True)
    return label


class PresetRow(QWidget):
    """Row of checkable 15/20/25/30 minute buttons."""

    def __init__(self, on_selected, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.group = QButtonGroup(self)
        self.group.setExclusive(True)
        for minutes in config.PRESET_MINUTES:
            button = QPushButton(f"{minutes}m")
            button.setObjectName("PresetButton")
            button.setCheckable(True)
            self.group.addButton(button, minutes)
            layout.addWidget(button)
        layout.addStretch()
        self.group.idClicked.connect(on_selected)

    def select(self, minutes: int) -> None:
        button = self.group.button(minutes)
        if button is not None:
            button.setChecked(True)
            return
        checked = self.group.checkedButton()
        if checked is not None:
            self.group.setExclusive(False)
            checked.setChecked(False)
            self.group.setExclusive(True)


class OnboardingPage(QWidget):
    def __init__(self, app_state: AppState, on_done, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.app_state = app_state
        self._on_done = on_done
        self._selected_minutes = app_state.profile.preferred_session_minutes

        layout = QVBoxLayout(self)
        layout.setContentsMargins(40, 40, 40, 40)
        title = QLabel("Welcome to Foc.Us")
        title.setObjectName("AppTitle")
        layout.addWidget(title, alignment=Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(_muted("Take back your focus. Live more."), alignment=Qt.AlignmentFlag.AlignHCenter)

        layout.addWidget(QLabel("Your name"))
        self.name_edit = QLineEdit(app_state.profile.name)
        self.name_edit.setPlaceholderText("e.g., Joaquim")
        layout.addWidget(self.name_edit)

        layout.addWidget(QLabel("Daily focus goal (minutes)"))
        self.goal_edit = QLineEdit(str(app_state.profile.daily_goal_minutes))
        layout.addWidget(self.goal_edit)

        layout.addWidget(QLabel("Default session length (minutes)"))
        self.presets = PresetRow(self._select_preset)
        self.presets.select(self._selected_minutes)
        layout.addWidget(self.presets)

        start_btn = QPushButton("Start using Foc.Us")
        start_btn.setObjectName("PrimaryButton")
        start_btn.clicked.connect(self._finish)
        layout.addWidget(start_btn)

        quick_btn = QPushButton(f"Quick test mode ({config.QUICK_TEST_MINUTES} min sessions)")
        quick_btn.setObjectName("SecondaryButton")
        quick_btn.clicked.connect(lambda: self.app_state.set_quick_test_mode(True))
        layout.addWidget(quick_btn)

        layout.addWidget(_muted("Data is saved locally on this computer. No servers."))
        layout.addStretch()

    def _select_preset(self, minutes: int) -> None:
        self._selected_minutes = minutes

    def _finish(self) -> None:
        self.app_state.complete_onboarding(
            self.name_edit.text(),
            self.goal_edit.text(),
            preferred_minutes=self._selected_minutes,
        )
        self._on_done()


class MainWindow(QMainWindow):
    def __init__(self, app_state: AppState) -> None:
        super().__init__()
        self.setWindowTitle("Foc.Us")
        self.resize(520, 820)
        self.app_state = app_state

        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)
        self.onboarding = OnboardingPage(app_state, self._show_dashboard)
        self.stack.addWidget(self.onboarding)
        self.stack.addWidget(self._build_dashboard())

        self._connect_signals()
        if app_state.profile.onboarding_complete:
            self._show_dashboard()
        self.refresh()

    def _build_dashboard(self) -> QWidget:
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        page = QWidget()
        scroll.setWidget(page)
        layout = QVBoxLayout(page)

        header = QLabel("Foc.Us")
        header.setObjectName("AppTitle")
        layout.addWidget(header)
        self.greeting_label = _muted()
        layout.addWidget(self.greeting_label)

        timer_card, timer_layout = _card()
        timer_layout.addWidget(_title("Focus Session"))
        self.timer_label = QLabel("25:00")
        self.timer_label.setObjectName("TimerLabel")
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        timer_layout.addWidget(self.timer_label)

        controls = QHBoxLayout()
        self.start_btn = QPushButton("Start")
        self.start_btn.setObjectName("StartButton")
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.setObjectName("ResetButton")
        controls.addStretch()
        controls.addWidget(self.start_btn)
        controls.addWidget(self.reset_btn)
        controls.addStretch()
        timer_layout.addLayout(controls)

        extra = QHBoxLayout()
        self.distracted_btn = QPushButton("I got distracted")
        self.quick_btn = QPushButton("Quick test")
        self.quick_btn.setCheckable(True)
        extra.addStretch()
        extra.addWidget(self.distracted_btn)
        extra.addWidget(self.quick_btn)
        extra.addStretch()
        timer_layout.addLayout(extra)

        self.length_label = _muted()
        self.length_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        timer_layout.addWidget(self.length_label)
        self.presets = PresetRow(self.app_state.set_preferred_minutes)
        timer_layout.addWidget(self.presets)
        layout.addWidget(timer_card)

        stats_card, stats_layout = _card()
        stats_layout.addWidget(_title("Dashboard"))
        self.today_label = QLabel()
        self.week_label = QLabel()
        self.points_label = QLabel()
        self.streak_label = QLabel()
        for label in (self.today_label, self.week_label, self.points_label, self.streak_label):
            stats_layout.addWidget(label)
        stats_layout.addWidget(_muted("Daily goal progress"))
        self.goal_bar = QProgressBar()
        self.goal_bar.setRange(0, 100)
        self.goal_bar.setTextVisible(False)
        stats_layout.addWidget(self.goal_bar)
        self.interruptions_label = _muted()
        stats_layout.addWidget(self.interruptions_label)
        layout.addWidget(stats_card)

        self.suggestion_card, suggestion_layout = _card("SuggestionCard")
        suggestion_layout.addWidget(_title("Suggestion"))
        self.suggestion_reason = QLabel()
        self.suggestion_reason.setWordWrap(True)
        self.suggestion_text = QLabel()
        suggestion_layout.addWidget(self.suggestion_reason)
        suggestion_layout.addWidget(self.suggestion_text)
        suggestion_buttons = QHBoxLayout()
        self.apply_btn = QPushButton("Apply suggestion")
        self.apply_btn.setObjectName("PrimaryButton")
        self.dismiss_btn = QPushButton("Dismiss")
        self.dismiss_btn.setObjectName("SecondaryButton")
        suggestion_buttons.addWidget(self.apply_btn)
        suggestion_buttons.addWidget(self.dismiss_btn)
        suggestion_buttons.addStretch()
        suggestion_layout.addLayout(suggestion_buttons)
        self.suggestion_card.setVisible(False)
        layout.addWidget(self.suggestion_card)

        actions_card, actions_layout = _card()
        actions_layout.addWidget(_title("Actions"))
        self.export_btn = QPushButton("Export sessions (JSON)")
        self.export_btn.setObjectName("PrimaryButton")
        self.import_btn = QPushButton("Import sessions (JSON)")
        self.import_btn.setObjectName("SecondaryButton")
        self.reset_all_btn = QPushButton("Reset local data")
        self.reset_all_btn.setObjectName("SecondaryButton")
        for button in (self.export_btn, self.import_btn, self.reset_all_btn):
            actions_layout.addWidget(button)
        layout.addWidget(actions_card)
        layout.addStretch()

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self.app_state.toggle)
        self.addAction(space_action)
        return scroll

    def _connect_signals(self) -> None:
        self.start_btn.clicked.connect(self.app_state.toggle)
        self.reset_btn.clicked.connect(self.app_state.reset_timer)
        self.distracted_btn.clicked.connect(self.app_state.interrupt)
        self.quick_btn.toggled.connect(self._toggle_quick_test)
        self.apply_btn.clicked.connect(self._apply_suggestion)
        self.dismiss_btn.clicked.connect(self.app_state.dismiss_suggestion)
        self.export_btn.clicked.connect(self.export_sessions)
        self.import_btn.clicked.connect(self.import_sessions)
        self.reset_all_btn.clicked.connect(self.reset_all)

        self.app_state.timer_changed.connect(self._on_timer_changed)
        self.app_state.state_changed.connect(self.refresh)
        self.app_state.session_recorded.connect(self._on_session_recorded)
        self.app_state.suggestion_changed.connect(self._on_suggestion_changed)

    def _show_dashboard(self) -> None:
        self.stack.setCurrentIndex(1)
        self.refresh()

    def _toggle_quick_test(self, enabled: bool) -> None:
        self.app_state.set_quick_test_mode(enabled)
        self.quick_btn.setText("Test: ON" if enabled else "Quick test")

    def _on_timer_changed(self, snapshot: TimerSnapshot) -> None:
        self.timer_label.setText(format_remaining(snapshot.remaining_seconds))
        running = snapshot.phase == TimerPhase.RUNNING
        self.start_btn.setText("Pause" if running else "Start")
        self.start_btn.setProperty("running", running)
        self.start_btn.style().unpolish(self.start_btn)
        self.start_btn.style().polish(self.start_btn)

    def _on_session_recorded(self, outcome: Outcome) -> None:
        # Shown after the timer has reset and the dashboard has refreshed.
        QTimer.singleShot(0, lambda: self._announce_outcome(outcome))

    def _announce_outcome(self, outcome: Outcome) -> None:
        minutes = outcome.record.focused_minutes
        if outcome.record.interrupted:
            QMessageBox.information(self, "Session interrupted", f"You still got {minutes} min. Keep going!")
        else:
            QMessageBox.information(
                self,
                "Session complete!",
                f"You earned {outcome.reward} pts. Streak: {outcome.streak} day(s).",
            )

    def _on_suggestion_changed(self, suggestion: Suggestion | None) -> None:
        self.suggestion_card.setVisible(suggestion is not None)
        if suggestion is None:
            return
        self.suggestion_reason.setText(suggestion.reason)
        self.suggestion_text.setText(f"We suggest shorter sessions: {suggestion.suggested_minutes} min")

    def _apply_suggestion(self) -> None:
        suggestion = self.app_state.suggestion
        if suggestion and self.app_state.apply_suggestion():
            QMessageBox.information(
                self, "Suggestion applied", f"Session length set to {suggestion.suggested_minutes} min."
            )

    def refresh(self) -> None:
        profile: ProfileState = self.app_state.profile
        stats = self.app_state.stats()
        self.greeting_label.setText(f"Focus + time back{', ' + profile.name if profile.name else ''}")
        self.length_label.setText(f"Session length: {profile.preferred_session_minutes} min")
        self.presets.select(profile.preferred_session_minutes)
        self.today_label.setText(f"Today focused: {stats.today_minutes} min")
        self.week_label.setText(f"Last 7 days: {stats.week_minutes} min")
        self.points_label.setText(f"Points: {profile.points}")
        self.streak_label.setText(f"Streak: {profile.streak} day(s)")
        self.goal_bar.setValue(stats.goal_progress_percent)
        self.interruptions_label.setText(
            f"Interruptions (last 7 days): {stats.session_count_7d} sessions, "
            f"{stats.interrupted_count_7d} interrupted"
        )
        self.quick_btn.blockSignals(True)
        self.quick_btn.setChecked(self.app_state.timer.quick_test_mode)
        self.quick_btn.blockSignals(False)
        self._on_timer_changed(self.app_state.timer.snapshot())
        self._on_suggestion_changed(self.app_state.suggestion)

    def export_sessions(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Export sessions", EXPORT_FILENAME, "JSON (*.json)")
        if not path:
            return
        try:
            Path(path).write_text(self.app_state.export_json(), encoding="utf-8")
        except OSError as exc:
            logger.warning("Export to %s failed: %s", path, exc)
            QMessageBox.warning(self, "Export", f"Could not write {path}")
            return
        QMessageBox.information(self, "Export", f"Sessions exported to {path}")

    def import_sessions(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Import sessions", "", "JSON (*.json)")
        if not path:
            return
        try:
            self.app_state.import_document(Path(path).read_bytes())
        except (OSError, ExportFormatError) as exc:
            logger.warning("Import from %s failed: %s", path, exc)
            QMessageBox.warning(self, "Import", f"Could not import {path}: {exc}")

    def reset_all(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset",
            "Clear all local sessions and profile data?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self.app_state.reset_all()
        self.onboarding = OnboardingPage(self.app_state, self._show_dashboard)
        old = self.stack.widget(0)
        self.stack.removeWidget(old)
        old.deleteLater()
        self.stack.insertWidget(0, self.onboarding)
        self.stack.setCurrentIndex(0)
        QMessageBox.information(self, "Reset", "Local data cleared.")

    def closeEvent(self, event) -> None:  # noqa: N802
        if self.app_state.timer.is_active:
            answer = QMessageBox.question(
                self,
                "Exit",
                "A focus session is active. Exit and mark it as interrupted?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            )
            if answer == QMessageBox.StandardButton.Yes:
                self.app_state.interrupt()
                event.accept()
            else:
                event.ignore()
            return
        event.accept()
