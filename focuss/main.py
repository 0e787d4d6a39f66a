from __future__ import annotations

"""Точка входа приложения Foc.Us.

Модуль настраивает логирование, подключает хранилище, загружает состояние
и запускает главное окно.
"""

import sys

from PyQt6.QtWidgets import QApplication

from focuss import config, log
from focuss.core.app_state import AppState
from focuss.data.storage import Storage
from focuss.ui.main_window import MainWindow
from focuss.ui.styles import apply_theme


def main() -> int:
    """Создает зависимости приложения и запускает главный UI-цикл."""
    log.setup()
    app = QApplication(sys.argv)
    apply_theme(app)

    storage = Storage(config.DB_PATH)
    if not storage.init_db():
        log.log.warning("Running without persistence, data will not be saved")

    app_state = AppState()
    app_state.load_from_storage(storage)

    window = MainWindow(app_state=app_state)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
