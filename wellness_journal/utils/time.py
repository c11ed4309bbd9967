from datetime import date, datetime

import pytz

from wellness_journal import config


def journal_tz():
    return pytz.timezone(config.JOURNAL_TIMEZONE)


def today() -> date:
    """
    Returns the current date in the journal timezone (UTC unless
    JOURNAL_TIMEZONE says otherwise).
    """
    return datetime.now(journal_tz()).date()


def today_iso() -> str:
    return today().isoformat()


def parse_iso_date(value) -> date | None:
    """Parse 'YYYY-MM-DD' (or a longer ISO timestamp) into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
