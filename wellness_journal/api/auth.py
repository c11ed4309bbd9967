from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import g, jsonify, request

from wellness_journal.services import supabase


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def require_user(view: Callable[..., Any]) -> Callable[..., Any]:
    """
    Resolve the bearer token to a user before the view runs.

    Sets g.user_id and g.db (a client that queries as that user).
    """

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        token = bearer_token()
        if not token:
            return jsonify({"ok": False, "error": "Not signed in"}), 401

        user_id, error = supabase.get_user(token)
        if error or not user_id:
            return jsonify({"ok": False, "error": error or "Invalid session"}), 401

        g.user_id = str(user_id)
        g.db = supabase.user_client(token)
        return view(*args, **kwargs)

    return wrapped
