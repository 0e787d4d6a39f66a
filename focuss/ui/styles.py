from __future__ import annotations

from PyQt6.QtWidgets import QApplication


THEME_QSS = """
QWidget {
    background: #f6fbf8;
    color: #0f172a;
    font-size: 13px;
}

QLabel, QCheckBox {
    background: transparent;
}

QFrame#Card {
    background: #ffffff;
    border: none;
    border-radius: 12px;
}

QFrame#SuggestionCard {
    background: #ffffff;
    border: 1px solid #f59e0b;
    border-radius: 12px;
}

QLabel#CardTitle {
    font-size: 14px;
    font-weight: 700;
}

QLabel#AppTitle {
    font-size: 20px;
    font-weight: 700;
}

QLabel#TimerLabel {
    font-size: 48px;
    color: #2563eb;
}

QLabel#MutedText {
    font-size: 12px;
    color: #64748b;
}

QPushButton {
    border: none;
    border-radius: 10px;
    padding: 8px 12px;
    font-weight: 700;
    background: #e6f0ff;
    color: #1e3a8a;
}

QPushButton:disabled {
    color: #94a3b8;
}

QPushButton#PrimaryButton {
    background: #059669;
    color: #ffffff;
    border-radius: 12px;
    padding: 12px 16px;
}

QPushButton#SecondaryButton {
    background: #e6f6ee;
    color: #065f46;
    border-radius: 12px;
    padding: 12px 16px;
}

QPushButton#StartButton {
    background: #2563eb;
    color: #ffffff;
    border-radius: 12px;
    padding: 12px 22px;
}

QPushButton#StartButton[running="true"] {
    background: #f59e0b;
}

QPushButton#ResetButton {
    background: #94a3b8;
    color: #ffffff;
    border-radius: 12px;
    padding: 12px 22px;
}

QPushButton#PresetButton {
    background: #ffffff;
    border: 1px solid #e2e8f0;
    color: #0f172a;
    border-radius: 8px;
    padding: 8px 10px;
}

QPushButton#PresetButton:checked {
    background: #2563eb;
    border-color: #2563eb;
    color: #ffffff;
}

QLineEdit, QSpinBox {
    background: #ffffff;
    border: none;
    border-radius: 10px;
    padding: 10px;
}

QProgressBar {
    border: 0;
    border-radius: 8px;
    background: #e6eef7;
    max-height: 10px;
}

QProgressBar::chunk {
    border-radius: 8px;
    background: #059669;
}
"""


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
