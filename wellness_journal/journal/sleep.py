from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Tuple

from wellness_journal.utils.time import journal_tz

DEFAULT_SLEEP_START = "23:00"
DEFAULT_SLEEP_END = "07:00"


def parse_hhmm(value: Any) -> Optional[time]:
    """Parse 'HH:MM', 'HH.MM' or 'HH:MM:SS' (or a time object) into a time.

    Anything else, including out-of-range values like '25:00', gives None.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None

    for fmt in ("%H:%M", "%H.%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    return None


def sleep_duration_hours(start: Any, end: Any) -> Optional[float]:
    """
    Hours between falling asleep and waking up.

    A wake-up time earlier than the bedtime means the night crossed
    midnight. Returns None when either time is missing.
    """
    start_time = parse_hhmm(start)
    end_time = parse_hhmm(end)
    if start_time is None or end_time is None:
        return None

    anchor = date(2000, 1, 1)
    start_dt = datetime.combine(anchor, start_time)
    end_dt = datetime.combine(anchor, end_time)
    if end_dt < start_dt:
        end_dt += timedelta(days=1)
    return (end_dt - start_dt).total_seconds() / 3600


def format_sleep_hours(start: Any, end: Any) -> str:
    hours = sleep_duration_hours(start, end)
    if hours is None:
        return "-"
    return f"{hours:.1f}h"


def sleep_window(
    day: date,
    start: Any,
    end: Any,
    tz=None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Anchor a bedtime/wake-up pair to real timestamps.

    - The wake-up time falls on `day`.
    - If bedtime is later in the clock than wake-up, bedtime was the
      previous day.
    - Unparseable sides come back as None.
    """
    tz = tz or journal_tz()
    start_time = parse_hhmm(start)
    end_time = parse_hhmm(end)

    end_dt = None
    if end_time is not None:
        end_dt = tz.localize(datetime.combine(day, end_time))

    start_date = day
    if start_time is not None and end_time is not None and start_time > end_time:
        start_date = day - timedelta(days=1)

    start_dt = None
    if start_time is not None:
        start_dt = tz.localize(datetime.combine(start_date, start_time))

    return start_dt, end_dt
