"""
Input validators and normalizers.

Responsibilities:
- User text cleaning (strip control chars, keep spacing, reject over-long input)
- Short label sanitation (style ids)
- Required-field checks for request bodies
- JSON schema validation wrappers for request payloads

Connects:
- routes/remix_routes.py, routes/saved_routes.py, routes/styles_routes.py
- service/style_weights.py (payload shape errors)
"""

from __future__ import annotations
import re
from typing import Any, Dict, Optional, Tuple

import jsonschema


class ValidationError(ValueError):
    pass


_CONTROL = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_SPACES = re.compile(r"[ \t]+")


def sanitize_text(s: Any, *, max_len: int = 80) -> str:
    # Short labels only (style ids, names). Whitespace runs collapse.
    s = str(s or "").replace("\x00", "")
    s = _CONTROL.sub(" ", s)
    s = _SPACES.sub(" ", s).strip()
    return s[:max_len]


MAX_TEXT_LEN = 20000


def clean_text(s: Any, *, max_len: int = MAX_TEXT_LEN) -> str:
    """
    User text bound for the generator. Control characters go; spacing and
    paragraph breaks are kept as written. Text over max_len is rejected,
    never truncated.
    """
    t = _CONTROL.sub(" ", str(s or "").replace("\x00", "")).strip()
    if len(t) > max_len:
        raise ValidationError(f"text too long (max {max_len} characters)")
    return t


def require_fields(data: Dict[str, Any], *names: str, message: Optional[str] = None) -> None:
    missing = [n for n in names if not data.get(n)]
    if missing:
        raise ValidationError(message or f"Missing {' or '.join(missing)}")


# --- Schema validation ---

def validate_json(data: Any, *, schema: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Returns (ok, error_message).
    """
    try:
        jsonschema.validate(instance=data, schema=schema)
        return True, None
    except jsonschema.ValidationError as e:
        return False, e.message


def ensure_valid(data: Any, *, schema: Dict[str, Any]) -> None:
    ok, err = validate_json(data, schema=schema)
    if not ok:
        raise ValidationError(err or "invalid payload")


# --- Payload schemas ---

STYLE_WEIGHTS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "minItems": 1,
    "items": {
        "type": "object",
        "required": ["id", "weight"],
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "weight": {"type": "integer", "minimum": 0, "maximum": 100},
        },
    },
}

CUSTOM_STYLE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "maxLength": 80},
        "description": {"type": "string", "maxLength": 500},
        "category": {"type": "string", "maxLength": 60},
        "baseTone": {"type": "string"},
        "isEnabled": {"type": "boolean"},
    },
}
