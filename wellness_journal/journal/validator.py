"""jsonschema checks for the rows and request bodies this app accepts."""

import json
import os
from functools import lru_cache
from typing import Any, Dict, Tuple

from jsonschema import ValidationError, validate

SCHEMA_DIR = os.path.join(os.path.dirname(__file__), "schemas")

PAYLOAD_SCHEMAS = {
    "record_form": "record_form.json",
    "health_log": "health_log.json",
    "entry": "entry.json",
}


@lru_cache(maxsize=None)
def load_schema(kind: str) -> Dict[str, Any]:
    with open(os.path.join(SCHEMA_DIR, PAYLOAD_SCHEMAS[kind]), encoding="utf-8") as f:
        return json.load(f)


def validate_payload(kind: str, data: Dict[str, Any]) -> Tuple[bool, str]:
    """(True, "") when `data` matches the `kind` schema, else (False, first error)."""
    try:
        validate(instance=data, schema=load_schema(kind))
    except ValidationError as e:
        return False, e.message
    return True, ""
