"""
Daily record form.

Three conversions live here:

- a stored health_logs row -> RecordForm (to edit an existing day)
- a submitted JSON body    -> RecordForm
- a RecordForm             -> advisor request / health_logs row

Sections the user has switched off (see UserModes) are never sent to the
advisor and are stored as NULL.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from wellness_journal.journal.drinks import (
    AddedDrink,
    aggregate_drinks,
    make_drink,
    parse_alcohol_type,
    previous_alcohol_summary,
)
from wellness_journal.journal.models import (
    DEFAULT_MOOD,
    DEFAULT_PAIN,
    DEFAULT_STRESS,
    PERIOD_NONE,
    SLEEP_QUALITY_NORMAL,
    STOOL_NORMAL,
    TRIGGER_HABIT,
    RecordForm,
    UserModes,
    UserProfile,
)
from wellness_journal.journal.validator import validate_payload
from wellness_journal.utils.time import parse_iso_date

TRIGGER_MARKER = "【飲酒理由】"
_TRIGGER_SUFFIX = re.compile(r"\n" + re.escape(TRIGGER_MARKER) + r".*$")

_NUMERIC_FIELDS = (
    "spending",
    "weight",
    "body_fat",
    "calories",
    "protein",
    "steps",
    "exercise_minutes",
)


class FormError(ValueError):
    """Submitted record form failed validation."""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def strip_trigger_suffix(memo: Optional[str]) -> str:
    if not isinstance(memo, str):
        return ""
    return _TRIGGER_SUFFIX.sub("", memo).strip()


def form_from_log(date: str, log: Optional[Dict[str, Any]]) -> RecordForm:
    """
    Fill the form from a stored row, or return a blank form for `date`.

    The drinking reason is not restored: it lives inside the memo text and
    the form always starts from the default reason.
    """
    if not log:
        return RecordForm(date=date)

    form = RecordForm(
        date=date,
        memo=strip_trigger_suffix(log.get("memo")),
        medication_taken=bool(log.get("medication_taken")),
        general_mood=_default(log.get("general_mood"), DEFAULT_MOOD),
        period_status=log.get("period_status") or PERIOD_NONE,
        meal_description=log.get("meal_description") or "",
        pain_level=_default(log.get("pain_level"), DEFAULT_PAIN),
        stool_type=log.get("stool_type") or STOOL_NORMAL,
        alcohol_trigger=TRIGGER_HABIT,
        stress_level=_default(log.get("stress_level"), DEFAULT_STRESS),
        sleep_quality=log.get("sleep_quality") or SLEEP_QUALITY_NORMAL,
    )
    for name in _NUMERIC_FIELDS:
        setattr(form, name, _as_text(log.get(name)))

    restored = parse_alcohol_type(log.get("alcohol_type"), log.get("alcohol_amount"))
    if restored:
        form.drinks = restored
        form.previous_alcohol_summary = ""
    else:
        form.drinks = []
        form.previous_alcohol_summary = previous_alcohol_summary(log.get("alcohol_amount"))
    return form


def drinks_from_request(items: List[Dict[str, Any]]) -> List[AddedDrink]:
    drinks = []
    for item in items:
        try:
            drinks.append(make_drink(item["key"], int(item.get("count", 1))))
        except KeyError as e:
            raise FormError(f"Unknown drink preset: {item.get('key')!r}") from e
    return drinks


def form_from_request(
    data: Dict[str, Any],
    drinks: Optional[List[AddedDrink]] = None,
) -> RecordForm:
    """
    Build a RecordForm from a submitted JSON body.

    `drinks` overrides the body's own "drinks" list (the server-side draft
    is passed here when the client did not send one).
    """
    ok, err = validate_payload("record_form", data)
    if not ok:
        raise FormError(err)
    if parse_iso_date(data["date"]) is None:
        raise FormError(f"Invalid date: {data['date']!r}")

    form = form_from_log(data["date"], None)
    for name in (
        "memo",
        "medication_taken",
        "general_mood",
        "period_status",
        "meal_description",
        "meal_image_base64",
        "pain_level",
        "stool_type",
        "alcohol_trigger",
        "stress_level",
        "sleep_quality",
    ):
        if data.get(name) is not None:
            setattr(form, name, data[name])
    for name in _NUMERIC_FIELDS:
        setattr(form, name, _as_text(data.get(name)))

    if drinks is not None:
        form.drinks = list(drinks)
    else:
        form.drinks = drinks_from_request(data.get("drinks") or [])
    return form


def _parse_int(value: str) -> Optional[int]:
    number = _parse_float(value)
    if number is None:
        return None
    return int(number)


def _parse_float(value: str) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    # "inf", "nan" and 1e400 count as blank
    return number if math.isfinite(number) else None


def build_advice_request(form: RecordForm, modes: UserModes) -> Dict[str, Any]:
    """Request body for the daily advice call."""
    total_ml, _ = aggregate_drinks(form.drinks)
    request: Dict[str, Any] = {
        "mode": "daily",
        "logs": None,
        "meal_description": form.meal_description,
        "general_mood": form.general_mood,
        "pain_level": form.pain_level if modes.mode_ibd else 0,
        "stool_type": form.stool_type if modes.mode_ibd else "",
        "weight": form.weight if modes.mode_diet else "",
        "steps": form.steps if modes.mode_diet else "",
        "alcohol_amount": total_ml if modes.mode_alcohol else 0,
        "alcohol_reason": form.alcohol_trigger if modes.mode_alcohol else "",
        "medication_taken": form.medication_taken,
        "stress_level": form.stress_level if modes.mode_mental else None,
        "sleep_quality": form.sleep_quality if modes.mode_mental else None,
    }
    if form.meal_image_base64:
        request["meal_image_base64"] = form.meal_image_base64
    return request


def build_log_payload(
    form: RecordForm,
    profile: UserProfile,
    user_id: str,
    ai_comment: str,
) -> Dict[str, Any]:
    """
    Row for health_logs, upserted on (user_id, date).

    Raises FormError if the row does not match the health_log schema.
    """
    modes = profile.modes
    total_ml, alcohol_type = aggregate_drinks(form.drinks)

    memo = form.memo or ""
    if form.alcohol_trigger and modes.mode_alcohol:
        memo += f"\n{TRIGGER_MARKER}{form.alcohol_trigger}"

    diet = modes.mode_diet
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "date": form.date,
        "memo": memo,
        "medication_taken": bool(form.medication_taken),
        "general_mood": form.general_mood,
        "meal_description": form.meal_description or "",
        "period_status": form.period_status if profile.is_female else None,
        "ai_comment": ai_comment,
        "pain_level": form.pain_level if modes.mode_ibd else None,
        "stool_type": form.stool_type if modes.mode_ibd else None,
        "alcohol_amount": total_ml if modes.mode_alcohol else 0,
        "alcohol_percent": 0,
        "alcohol_type": alcohol_type if modes.mode_alcohol else None,
        "stress_level": form.stress_level if modes.mode_mental else None,
        "sleep_quality": form.sleep_quality if modes.mode_mental else None,
        "spending": _parse_int(form.spending) if modes.mode_mental else None,
        "weight": _parse_float(form.weight) if diet else None,
        "body_fat": _parse_float(form.body_fat) if diet else None,
        "calories": _parse_int(form.calories) if diet else None,
        "protein": _parse_float(form.protein) if diet else None,
        "steps": _parse_int(form.steps) if diet else None,
        "exercise_minutes": _parse_int(form.exercise_minutes) if diet else None,
    }

    ok, err = validate_payload("health_log", payload)
    if not ok:
        raise FormError(err)
    return payload

