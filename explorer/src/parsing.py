"""Helpers for reading JSON out of generated text."""

import json
import re
from typing import Optional

from .errors import ResponseParseError

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_json_object(text: str, required_list: Optional[str] = None) -> dict:
    """
    Parse a JSON object from a response, tolerating a surrounding code fence
    or prose. When ``required_list`` is given, that key must hold a list.

    Raises:
        ResponseParseError: if no such object can be read
    """
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned))

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(cleaned)
        if not match:
            raise ResponseParseError("No JSON object found in response") from None
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Invalid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise ResponseParseError("Response is not a JSON object")
    if required_list and not isinstance(data.get(required_list), list):
        raise ResponseParseError(f"Response is missing a '{required_list}' list")
    return data
