from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client, create_client

from wellness_journal import config

LOGS_TABLE = "health_logs"
SETTINGS_TABLE = "user_settings"

Result = Tuple[Any, Optional[str]]

# Lazily-initialized anon client
_client: Optional[Client] = None


def _require_settings() -> None:
    if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
        logging.error("SUPABASE_URL / SUPABASE_ANON_KEY are not set; backend is unavailable.")
        raise RuntimeError("SUPABASE_URL / SUPABASE_ANON_KEY are not set")


def _get_client() -> Client:
    """
    Lazily initialize the anon client so that importing this module
    does not explode if the settings are missing (e.g. during tests).
    """
    global _client
    if _client is None:
        _require_settings()
        _client = create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
    return _client


def user_client(access_token: str) -> Client:
    """
    A fresh client whose table queries run as the signed-in user, so
    row-level security sees their id.
    """
    _require_settings()
    client = create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
    client.postgrest.auth(access_token)
    return client


def _fail(table: str, e: Exception) -> Result:
    logging.error("[SUPABASE ERROR %s] %s", table, e)
    return None, str(e)


def _rows(response: Any) -> Any:
    # maybe_single() gives back None instead of an empty response
    if response is None:
        return None
    return response.data


# ================================
# AUTH
# ================================
def sign_in(email: str, password: str) -> Result:
    """
    Password sign-in.
    Returns:
        ({"access_token", "refresh_token", "user_id"}, None) or (None, error_str)
    """
    try:
        res = _get_client().auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:  # noqa: BLE001
        return _fail("auth", e)

    if res.session is None or res.user is None:
        return None, "No session returned"
    return {
        "access_token": res.session.access_token,
        "refresh_token": res.session.refresh_token,
        "user_id": res.user.id,
    }, None


def sign_up(email: str, password: str) -> Result:
    try:
        res = _get_client().auth.sign_up({"email": email, "password": password})
    except Exception as e:  # noqa: BLE001
        return _fail("auth", e)
    user_id = res.user.id if res.user else None
    return {"user_id": user_id}, None


def get_user(access_token: str) -> Result:
    """
    Resolve an access token to the user id, or (None, error_str).
    """
    try:
        res = _get_client().auth.get_user(access_token)
    except Exception as e:  # noqa: BLE001
        return _fail("auth", e)
    if res is None or res.user is None:
        return None, "Invalid session"
    return res.user.id, None


# ================================
# SETTINGS / LOGS
# ================================
def fetch_settings(client: Client, user_id: str) -> Result:
    try:
        response = (
            client.table(SETTINGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return _rows(response), None
    except Exception as e:  # noqa: BLE001
        return _fail(SETTINGS_TABLE, e)


def fetch_log_for_date(client: Client, user_id: str, day: str) -> Result:
    try:
        response = (
            client.table(LOGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("date", day)
            .maybe_single()
            .execute()
        )
        return _rows(response), None
    except Exception as e:  # noqa: BLE001
        return _fail(LOGS_TABLE, e)


def fetch_log_by_id(client: Client, user_id: str, log_id: Any) -> Result:
    try:
        response = (
            client.table(LOGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("id", log_id)
            .maybe_single()
            .execute()
        )
        return _rows(response), None
    except Exception as e:  # noqa: BLE001
        return _fail(LOGS_TABLE, e)


def fetch_logs_between(client: Client, user_id: str, start: str, end: str) -> Result:
    """Logs with start <= date <= end, oldest first."""
    try:
        response = (
            client.table(LOGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .gte("date", start)
            .lte("date", end)
            .order("date", desc=False)
            .execute()
        )
        return list(response.data or []), None
    except Exception as e:  # noqa: BLE001
        return _fail(LOGS_TABLE, e)


def upsert_log(client: Client, payload: Dict[str, Any]) -> Result:
    """
    Insert or overwrite the log for (user_id, date).
    """
    try:
        response = client.table(LOGS_TABLE).upsert(payload, on_conflict="user_id,date").execute()
        return response.data, None
    except Exception as e:  # noqa: BLE001
        return _fail(LOGS_TABLE, e)


def insert_entry(client: Client, payload: Dict[str, Any]) -> Result:
    try:
        response = client.table(LOGS_TABLE).insert(payload).execute()
        return response.data, None
    except Exception as e:  # noqa: BLE001
        return _fail(LOGS_TABLE, e)


def delete_log(client: Client, user_id: str, log_id: Any) -> Result:
    """
    Delete one log. Returns (deleted_rows, None); an empty list means
    nothing matched.
    """
    try:
        response = (
            client.table(LOGS_TABLE)
            .delete()
            .eq("id", log_id)
            .eq("user_id", user_id)
            .execute()
        )
        deleted: List[Dict[str, Any]] = list(response.data or [])
        return deleted, None
    except Exception as e:  # noqa: BLE001
        return _fail(LOGS_TABLE, e)
