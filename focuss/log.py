from __future__ import annotations

"""Настройка логирования: stderr с уровнем из окружения и файл с ротацией."""

import logging
import logging.handlers

from focuss import config


log = logging.getLogger("focuss")
log.addHandler(logging.NullHandler())

_configured = False


def setup() -> None:
    """Подключает обработчики один раз; повторные вызовы ничего не делают."""
    global _configured
    if _configured:
        return
    _configured = True

    level = getattr(logging, config.LOG_LEVEL, logging.INFO)
    log.setLevel(logging.DEBUG)

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(fmt)
    log.addHandler(stderr_handler)

    try:
        home = config.ensure_home()
        file_handler = logging.handlers.RotatingFileHandler(
            str(home / "focuss.log"), maxBytes=1024 * 1024, backupCount=3,
        )
    except OSError:
        log.warning("Log directory %s is not writable, logging to stderr only", config.FOCUSS_HOME)
        return
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    log.addHandler(file_handler)
