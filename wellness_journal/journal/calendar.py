from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from wellness_journal.journal.sleep import format_sleep_hours, sleep_window
from wellness_journal.utils.time import parse_iso_date

LogDict = Dict[str, Any]

WEEKDAY_HEADERS = ["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]

# date.weekday(): Monday == 0
_JA_WEEKDAYS = ["月", "火", "水", "木", "金", "土", "日"]

NO_MEALS_TEXT = "記録なし"


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return month_start(day) + relativedelta(months=1, days=-1)


def shift_month(day: date, months: int) -> date:
    return month_start(day) + relativedelta(months=months)


def parse_month(value: Optional[str]) -> Optional[date]:
    """'YYYY-MM' (or a full date) -> first day of that month."""
    if not value:
        return None
    value = value.strip()
    if len(value) == 7:
        value = f"{value}-01"
    parsed = parse_iso_date(value)
    return month_start(parsed) if parsed else None


def _week_start(day: date) -> date:
    # Weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _week_end(day: date) -> date:
    return _week_start(day) + timedelta(days=6)


def month_grid(month: date) -> List[date]:
    """Every day shown for `month`: whole weeks, Sunday through Saturday."""
    first = _week_start(month_start(month))
    last = _week_end(month_end(month))
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def bucket_logs(logs: Iterable[LogDict]) -> Dict[date, LogDict]:
    """Index logs by day. The first log seen for a day wins."""
    buckets: Dict[date, LogDict] = {}
    for log in logs:
        day = parse_iso_date(log.get("date"))
        if day is None or day in buckets:
            continue
        buckets[day] = log
    return buckets


def score_tone(score: Optional[float]) -> str:
    if score is None:
        return "neutral"
    if score >= 8:
        return "good"
    if score <= 4:
        return "bad"
    return "neutral"


def build_month(month: date, logs: Iterable[LogDict], today: date) -> Dict[str, Any]:
    first = month_start(month)
    buckets = bucket_logs(logs)

    cells = []
    for day in month_grid(first):
        log = buckets.get(day)
        score = log.get("score") if log else None
        cells.append(
            {
                "date": day.isoformat(),
                "day": day.day,
                "in_month": day.month == first.month and day.year == first.year,
                "is_today": day == today,
                "log_id": log.get("id") if log else None,
                "score": score,
                "tone": score_tone(score) if log else None,
                "clickable": log is not None,
            }
        )

    return {
        "title": first.strftime("%Y.%m"),
        "month": first.strftime("%Y-%m"),
        "prev_month": shift_month(first, -1).strftime("%Y-%m"),
        "next_month": shift_month(first, 1).strftime("%Y-%m"),
        "weekdays": list(WEEKDAY_HEADERS),
        "days": cells,
    }


def japanese_date_label(day: date) -> str:
    return f"{day.month}月{day.day}日 ({_JA_WEEKDAYS[day.weekday()]})"


def day_detail(log: LogDict) -> Dict[str, Any]:
    """Everything the day popup shows for one log."""
    day = parse_iso_date(log.get("date"))
    score = log.get("score")
    start, end = log.get("sleep_start"), log.get("sleep_end")

    window = None
    if day is not None:
        start_dt, end_dt = sleep_window(day, start, end)
        if start_dt is not None and end_dt is not None:
            window = {"start": start_dt.isoformat(), "end": end_dt.isoformat()}

    return {
        "id": log.get("id"),
        "date": day.isoformat() if day else None,
        "label": japanese_date_label(day) if day else "",
        "score": score,
        "tone": score_tone(score),
        "sleep": format_sleep_hours(start, end),
        "sleep_window": window,
        "meals": log.get("meals") or NO_MEALS_TEXT,
    }
