from __future__ import annotations

from typing import Dict, List

from wellness_journal.journal.drinks import AddedDrink, make_drink, remove_drink as _without

# Simple in-memory draft store: user_id -> drinks added but not yet saved.
# Fine for a single web instance; the form can always resend its own list.
_DRAFTS: Dict[str, List[AddedDrink]] = {}


def get_drinks(user_id: str) -> List[AddedDrink]:
    """
    Return the draft drinks for this user (empty list if none).
    """
    return list(_DRAFTS.get(str(user_id), []))


def set_drinks(user_id: str, drinks: List[AddedDrink]) -> None:
    _DRAFTS[str(user_id)] = list(drinks)


def add_drink(user_id: str, key: str, count: int = 1) -> List[AddedDrink]:
    drinks = get_drinks(user_id)
    drinks.append(make_drink(key, count))
    set_drinks(user_id, drinks)
    return drinks


def remove_drink(user_id: str, drink_id: int) -> List[AddedDrink]:
    drinks = _without(get_drinks(user_id), drink_id)
    set_drinks(user_id, drinks)
    return drinks


def has_draft(user_id: str) -> bool:
    return str(user_id) in _DRAFTS


def clear(user_id: str) -> None:
    """
    Drop the draft for this user.
    """
    _DRAFTS.pop(str(user_id), None)
