"""
Serialization of cached repository counts.

Counts are stored as decimal text so the entries stay readable with
``redis-cli``.
"""

from typing import Any, Optional


def encode_count(count: int) -> str:
    """Serialize a repository count for storage."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ValueError(f"Not a repository count: {count!r}")
    return str(count)


def decode_count(raw: Any) -> Optional[int]:
    """Parse a stored value back into a count; ``None`` when it is not one."""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)
