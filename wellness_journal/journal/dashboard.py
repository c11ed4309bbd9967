from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Tuple

PERIODS = (7, 30)

NO_RECORDS_REPORT = "この期間の記録がまだないわ。記録画面で入力してから出直しなさい！"


def parse_period(value: Any) -> int:
    """7 or 30; anything else raises ValueError."""
    try:
        period = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid period: {value!r}") from e
    if period not in PERIODS:
        raise ValueError(f"Period must be one of {PERIODS}, got {period}")
    return period


def period_window(period: int, today: date) -> Tuple[date, date]:
    """Inclusive (start, end) date range for the last `period` days."""
    return today - timedelta(days=period), today


def chart_series(logs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One chart row per log, oldest first.

    Missing values stay None so the chart can bridge the gap.
    """
    rows = []
    for log in sorted(logs, key=lambda row: str(row.get("date") or "")):
        full_date = str(log.get("date") or "")[:10]
        rows.append(
            {
                "date": full_date[5:],
                "full_date": full_date,
                "mood": log.get("general_mood"),
                "pain": log.get("pain_level"),
                "stress": log.get("stress_level"),
            }
        )
    return rows
