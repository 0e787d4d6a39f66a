from __future__ import annotations

"""Экспорт и импорт истории сессий и профиля в виде самоописывающего JSON-документа."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from focuss.core.clock import from_epoch_ms, to_epoch_ms
from focuss.core.models import ProfileState, SessionRecord


EXPORT_FILENAME = "focuss_sessions.json"


class ExportFormatError(ValueError):
    """Документ не похож на результат экспорта."""


@dataclass(frozen=True)
class ExportBundle:
    records: list[SessionRecord]
    profile: ProfileState
    exported_at: datetime


def build_export_document(
    records: list[SessionRecord],
    profile: ProfileState,
    exported_at: datetime,
) -> dict[str, Any]:
    return {
        "sessions": [record.to_dict() for record in records],
        "user": profile.to_dict(),
        "exportedAt": to_epoch_ms(exported_at),
    }


def dumps(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2)


def parse_export_document(document: Any) -> ExportBundle:
    """Проверяет структуру документа; строку предварительно разбирает как JSON."""
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (ValueError, RecursionError) as exc:
            raise ExportFormatError(f"Export is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ExportFormatError("Export document must be a JSON object")

    sessions = document.get("sessions")
    user = document.get("user")
    if not isinstance(sessions, list):
        raise ExportFormatError("Export document has no 'sessions' list")
    if not isinstance(user, dict):
        raise ExportFormatError("Export document has no 'user' object")

    try:
        records = [SessionRecord.from_dict(entry) for entry in sessions]
        exported_at = from_epoch_ms(float(document.get("exportedAt", 0)))
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise ExportFormatError(str(exc)) from exc

    return ExportBundle(records=records, profile=ProfileState.from_dict(user), exported_at=exported_at)
