from __future__ import annotations

from typing import Any, Dict, Optional

from wellness_journal.journal.record import FormError
from wellness_journal.journal.sleep import (
    DEFAULT_SLEEP_END,
    DEFAULT_SLEEP_START,
    parse_hhmm,
    sleep_duration_hours,
)
from wellness_journal.journal.validator import validate_payload
from wellness_journal.utils.time import parse_iso_date

DEFAULT_SCORE = 5


def build_entry_payload(
    user_id: str,
    data: Dict[str, Any],
    today: str,
) -> Dict[str, Any]:
    """
    Row for a quick calendar entry (score, sleep window, meals).

    Missing fields fall back to today / score 5 / 23:00-07:00 / no meals.
    Raises FormError when the row is invalid.
    """
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "date": data.get("date") or today,
        "score": data.get("score", DEFAULT_SCORE),
        "sleep_start": _hhmm(data.get("sleep_start", DEFAULT_SLEEP_START)),
        "sleep_end": _hhmm(data.get("sleep_end", DEFAULT_SLEEP_END)),
        "meals": data.get("meals") or "",
    }

    ok, err = validate_payload("entry", payload)
    if not ok:
        raise FormError(err)
    if parse_iso_date(payload["date"]) is None:
        raise FormError(f"Invalid date: {payload['date']!r}")
    return payload


def entry_sleep_hours(payload: Dict[str, Any]) -> Optional[float]:
    hours = sleep_duration_hours(payload.get("sleep_start"), payload.get("sleep_end"))
    return round(hours, 1) if hours is not None else None


def _hhmm(value: Any) -> Optional[str]:
    """Normalise "7:00" to "07:00". Blank means no time."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = parse_hhmm(value)
    if parsed is None:
        raise FormError(f"Invalid time: {value!r}")
    return parsed.strftime("%H:%M")
