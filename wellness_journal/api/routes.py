from __future__ import annotations

import logging
from typing import Any, Dict, List

from flask import Blueprint, g, jsonify, request

from wellness_journal.api.auth import require_user
from wellness_journal.journal import calendar, dashboard, drafts
from wellness_journal.journal.drinks import AddedDrink, preset_options, total_pure_alcohol
from wellness_journal.journal.entry import build_entry_payload, entry_sleep_hours
from wellness_journal.journal.models import UserProfile
from wellness_journal.journal.record import (
    FormError,
    build_advice_request,
    build_log_payload,
    form_from_log,
    form_from_request,
)
from wellness_journal.services import advisor, supabase
from wellness_journal.utils.time import parse_iso_date, today, today_iso

api = Blueprint("api", __name__)


def _error(message: str, status: int) -> Any:
    return jsonify({"ok": False, "error": message}), status


def _drinks_body(drinks: List[AddedDrink]) -> Dict[str, Any]:
    return {
        "ok": True,
        "drinks": [d.to_dict() for d in drinks],
        "total_pure_alcohol": round(total_pure_alcohol(drinks), 1),
    }


def _load_profile() -> UserProfile:
    settings, error = supabase.fetch_settings(g.db, g.user_id)
    if error:
        # Settings are optional; an unreadable row behaves like no row
        logging.warning("[SETTINGS] falling back to defaults for %s: %s", g.user_id, error)
    return UserProfile.from_settings(settings)


@api.route("/", methods=["GET"])
def healthcheck() -> str:
    return "Wellness journal running"


# ================================
# AUTH
# ================================
@api.route("/api/auth/login", methods=["POST"])
def login() -> Any:
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    email = (body.get("email") or "").strip()
    password = body.get("password") or ""
    if not email or not password:
        return _error("email and password are required", 400)

    session, error = supabase.sign_in(email, password)
    if error:
        return _error(f"エラー: {error}", 401)
    return jsonify({"ok": True, **session})


@api.route("/api/auth/signup", methods=["POST"])
def signup() -> Any:
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    email = (body.get("email") or "").strip()
    password = body.get("password") or ""
    if not email or not password:
        return _error("email and password are required", 400)

    result, error = supabase.sign_up(email, password)
    if error:
        return _error(f"エラー: {error}", 400)
    return jsonify({"ok": True, "message": "確認メールを送信しました。", **result})


# ================================
# DAILY RECORD
# ================================
@api.route("/api/record", methods=["GET"])
@require_user
def get_record() -> Any:
    """
    Form state for one date: the saved log if there is one, defaults
    otherwise. Restored drinks become the user's draft.
    """
    day = request.args.get("date") or today_iso()
    if parse_iso_date(day) is None:
        return _error(f"Invalid date: {day!r}", 400)

    profile = _load_profile()
    log, error = supabase.fetch_log_for_date(g.db, g.user_id, day)
    if error:
        return _error(error, 502)

    form = form_from_log(day, log)
    drafts.set_drinks(g.user_id, form.drinks)

    return jsonify(
        {
            "ok": True,
            "form": form.to_dict(),
            "modes": profile.modes.to_dict(),
            "gender": profile.gender,
            "drink_presets": preset_options(),
            "total_pure_alcohol": round(total_pure_alcohol(form.drinks), 1),
        }
    )


@api.route("/api/record/drinks", methods=["GET"])
@require_user
def list_drinks() -> Any:
    return jsonify(_drinks_body(drafts.get_drinks(g.user_id)))


@api.route("/api/record/drinks", methods=["POST"])
@require_user
def add_drink() -> Any:
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    key = body.get("key", "beer350")
    try:
        count = int(body.get("count", 1))
        drinks = drafts.add_drink(g.user_id, key, count)
    except KeyError:
        return _error(f"Unknown drink preset: {key!r}", 400)
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)
    return jsonify(_drinks_body(drinks))


@api.route("/api/record/drinks/<int:drink_id>", methods=["DELETE"])
@require_user
def delete_drink(drink_id: int) -> Any:
    return jsonify(_drinks_body(drafts.remove_drink(g.user_id, drink_id)))


@api.route("/api/record", methods=["POST"])
@require_user
def submit_record() -> Any:
    """
    Save the day's record.

    1) ask the advisor for a comment (falls back to a fixed message)
    2) upsert the row for (user_id, date)
    3) clear the drink draft
    """
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    draft = None if "drinks" in body else drafts.get_drinks(g.user_id)

    try:
        form = form_from_request(body, drinks=draft)
    except FormError as e:
        return _error(str(e), 400)

    profile = _load_profile()
    ai_comment = advisor.daily_advice(build_advice_request(form, profile.modes))

    try:
        payload = build_log_payload(form, profile, g.user_id, ai_comment)
    except FormError as e:
        return _error(str(e), 400)

    saved, error = supabase.upsert_log(g.db, payload)
    if error:
        return _error(f"保存エラー: {error}", 502)

    drafts.clear(g.user_id)
    logging.info("[RECORD] saved %s for %s", form.date, g.user_id)
    return jsonify({"ok": True, "advice": ai_comment, "log": (saved or [payload])[0]})


# ================================
# ADVICE / REPORT
# ================================
@api.route("/api/advice", methods=["POST"])
@require_user
def advice() -> Any:
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    return jsonify({"advice": advisor.daily_advice(body)})


@api.route("/api/report", methods=["POST"])
@require_user
def report() -> Any:
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        period = dashboard.parse_period(body.get("period", 7))
    except ValueError as e:
        return jsonify({"report": str(e)}), 400

    start, end = dashboard.period_window(period, today())
    logs, error = supabase.fetch_logs_between(g.db, g.user_id, start.isoformat(), end.isoformat())
    if error:
        return jsonify({"report": advisor.REPORT_FALLBACK}), 502
    if not logs:
        return jsonify({"report": dashboard.NO_RECORDS_REPORT})
    return jsonify({"report": advisor.period_report(logs, period)})


# ================================
# DASHBOARD
# ================================
@api.route("/api/dashboard", methods=["GET"])
@require_user
def get_dashboard() -> Any:
    try:
        period = dashboard.parse_period(request.args.get("period", 7))
    except ValueError as e:
        return _error(str(e), 400)

    start, end = dashboard.period_window(period, today())
    logs, error = supabase.fetch_logs_between(g.db, g.user_id, start.isoformat(), end.isoformat())
    if error:
        return _error(error, 502)

    return jsonify(
        {
            "ok": True,
            "period": period,
            "start": start.isoformat(),
            "end": end.isoformat(),
            "series": dashboard.chart_series(logs),
        }
    )


# ================================
# CALENDAR / QUICK ENTRIES
# ================================
@api.route("/api/calendar", methods=["GET"])
@require_user
def get_calendar() -> Any:
    raw_month = request.args.get("month")
    month = calendar.parse_month(raw_month) if raw_month else calendar.month_start(today())
    if month is None:
        return _error(f"Invalid month: {raw_month!r}", 400)

    grid = calendar.month_grid(month)
    logs, error = supabase.fetch_logs_between(
        g.db, g.user_id, grid[0].isoformat(), grid[-1].isoformat()
    )
    if error:
        return _error(error, 502)

    return jsonify({"ok": True, **calendar.build_month(month, logs, today())})


@api.route("/api/calendar/<log_id>", methods=["GET"])
@require_user
def get_calendar_day(log_id: str) -> Any:
    log, error = supabase.fetch_log_by_id(g.db, g.user_id, log_id)
    if error:
        return _error(error, 502)
    if not log:
        return _error("Log not found", 404)
    return jsonify({"ok": True, **calendar.day_detail(log)})


@api.route("/api/entries", methods=["POST"])
@require_user
def create_entry() -> Any:
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        payload = build_entry_payload(g.user_id, body, today_iso())
    except FormError as e:
        return _error(str(e), 400)

    saved, error = supabase.insert_entry(g.db, payload)
    if error:
        return _error(f"保存に失敗しました: {error}", 502)

    return jsonify(
        {
            "ok": True,
            "entry": (saved or [payload])[0],
            "sleep_hours": entry_sleep_hours(payload),
        }
    ), 201


@api.route("/api/entries/<log_id>", methods=["DELETE"])
@require_user
def delete_entry(log_id: str) -> Any:
    deleted, error = supabase.delete_log(g.db, g.user_id, log_id)
    if error:
        return _error("削除に失敗しました", 502)
    if not deleted:
        return _error("Log not found", 404)
    return jsonify({"ok": True, "deleted": log_id})
