# src/generation/parsing.py - v1
"""Single cleanup pass from free-form model text to JSON.

No recovery is attempted beyond the documented cleanup: fences, trailing
commas and whitespace. Anything else is a GenerationParseError.
"""

from __future__ import annotations

import json
import re
from typing import Any

from topicforge.core.errors import GenerationParseError

_FENCE_RE = re.compile(r"```[a-zA-Z]*")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_json_text(text: str) -> str:
    """Strip code fences and trailing commas, collapse whitespace."""
    cleaned = _FENCE_RE.sub("", text)
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    cleaned = cleaned.replace("\r", " ").replace("\n", " ")
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip()


def load_json(text: str) -> Any:
    """Clean and parse model output.

    Raises:
        GenerationParseError: If the cleaned text is not valid JSON.
    """
    cleaned = clean_json_text(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GenerationParseError(
            f"Generated text is not valid JSON: {e.msg} at position {e.pos}",
            raw_text=text,
            cleaned_text=cleaned,
        ) from e


def load_json_object(text: str) -> Any:
    """Like load_json, but a top-level list yields its first element."""
    parsed = load_json(text)
    if isinstance(parsed, list):
        return parsed[0] if parsed else None
    return parsed
