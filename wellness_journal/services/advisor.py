from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import requests
from openai import OpenAI

from wellness_journal import config

DAILY_FALLBACK = "通信エラーよ！オネエがちょっと休憩中みたい。（API接続に失敗しました）"
REPORT_FALLBACK = "分析に失敗したわ。もう一度試してちょうだい！"

# Lazily-initialized OpenAI client
_client: Optional[OpenAI] = None


def _get_client() -> OpenAI:
    """
    Lazily initialize the OpenAI client so that importing this module
    does not explode if the key is missing (e.g. during local tests).
    """
    global _client
    if _client is None:
        if not config.OPENAI_API_KEY:
            logging.error("OPENAI_API_KEY is not set; advice is unavailable.")
            raise RuntimeError("OPENAI_API_KEY is not set")
        _client = OpenAI(api_key=config.OPENAI_API_KEY)
    return _client


SYSTEM_PROMPT = """
You are a blunt but caring health coach who writes in casual Japanese.
You receive a JSON object describing the user's health journal.

- mode "daily": comment on today's entry in a few short paragraphs.
- mode "period": look across the listed days and point out likely
  cause-and-effect patterns (food -> stomach, drinking -> mood, etc.).

Reply with plain text only. Never invent values that are not in the input.
"""


def _post_external(body: Dict[str, Any], key: str) -> str:
    """
    Ask the external advice endpoint. It answers {"advice": ...} or
    {"report": ...}.
    """
    resp = requests.post(config.ADVICE_API_URL, json=body, timeout=config.ADVICE_TIMEOUT)
    if resp.status_code != 200:
        raise RuntimeError(f"API Error: {resp.status_code} {resp.text}")
    text = resp.json().get(key)
    if not isinstance(text, str) or not text:
        raise RuntimeError(f"Advice endpoint returned no {key!r}")
    return text


def _user_content(body: Dict[str, Any]) -> Any:
    image = body.get("meal_image_base64")
    text_part = {k: v for k, v in body.items() if k != "meal_image_base64"}
    if not image:
        return json.dumps(text_part, ensure_ascii=False)
    return [
        {"type": "text", "text": json.dumps(text_part, ensure_ascii=False)},
        {"type": "image_url", "image_url": {"url": image}},
    ]


def _ask_model(body: Dict[str, Any]) -> str:
    response = _get_client().chat.completions.create(
        model=config.OPENAI_MODEL,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": _user_content(body)},
        ],
        temperature=0.7,
    )
    content = response.choices[0].message.content
    if not content:
        raise RuntimeError("Empty completion")
    return content.strip()


def _ask(body: Dict[str, Any], key: str) -> str:
    if config.ADVICE_API_URL:
        return _post_external(body, key)
    return _ask_model(body)


def daily_advice(request: Dict[str, Any]) -> str:
    """
    Narrative feedback for one day's record.

    Never raises: on any failure the fixed fallback comment is returned
    (and saved with the log like any other comment).
    """
    try:
        return _ask(request, "advice")
    except Exception as e:  # noqa: BLE001
        logging.error("[ADVICE ERROR] %s", e)
        return DAILY_FALLBACK


def period_report(logs: List[Dict[str, Any]], period: int) -> str:
    """
    Summary across a 7 or 30 day window. Same failure rule as daily_advice.
    """
    body = {
        "mode": "period",
        "period": period,
        "logs": [_report_row(log) for log in logs],
    }
    try:
        return _ask(body, "report")
    except Exception as e:  # noqa: BLE001
        logging.error("[REPORT ERROR] %s", e)
        return REPORT_FALLBACK


_REPORT_FIELDS = (
    "date",
    "general_mood",
    "pain_level",
    "stool_type",
    "stress_level",
    "sleep_quality",
    "alcohol_amount",
    "alcohol_type",
    "meal_description",
    "medication_taken",
    "period_status",
    "memo",
)


def _report_row(log: Dict[str, Any]) -> Dict[str, Any]:
    # Drop ids, ai_comment and null columns
    return {k: log.get(k) for k in _REPORT_FIELDS if log.get(k) is not None}
