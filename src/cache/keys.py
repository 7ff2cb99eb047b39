# src/cache/keys.py - v2
"""Cache key construction from semantic parts.

Long free-text parts are replaced by a marked prefix plus a SHA-256 digest
so keys stay bounded; other parts have the delimiter escaped. Empty parts
keep their position as empty segments.
"""

from __future__ import annotations

import hashlib

KEY_DELIMITER = ":"

# Escaped segments only ever start with a backslash as "\\" or "\:"
HASHED_MARKER = "\\#"


def make_cache_key(
    *parts: str | None,
    max_part_length: int = 100,
    prefix_length: int = 50,
) -> str:
    """Join parts into a collision-safe cache key.

    Args:
        *parts: Semantic parts, e.g. ("detail", topic title, fact text).
            None is encoded like "".
        max_part_length: Parts longer than this are hashed.
        prefix_length: Characters of a hashed part kept verbatim.
    """
    return KEY_DELIMITER.join(
        _encode_part(part or "", max_part_length, prefix_length) for part in parts
    )


def _encode_part(part: str, max_part_length: int, prefix_length: int) -> str:
    if len(part) > max_part_length:
        digest = hashlib.sha256(part.encode("utf-8")).hexdigest()[:16]
        return f"{HASHED_MARKER}{_escape(part[:prefix_length])}_{digest}"
    return _escape(part)


def _escape(part: str) -> str:
    return part.replace("\\", "\\\\").replace(KEY_DELIMITER, "\\" + KEY_DELIMITER)
