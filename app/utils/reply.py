# app/utils/reply.py
"""
Reply envelopes shared by every registry endpoint:
{"OK": <document | list | message>} on success, {"ERR": <reason>} otherwise.
"""

from typing import Any

# Largest value an Integer column holds on every supported backend
MAX_INT = 2**31 - 1


def ok(value: Any) -> dict:
    return {"OK": value}


def err(reason: str) -> dict:
    return {"ERR": reason}


def parse_id(raw) -> int:
    """Positive integer path parameter, or 0 when missing, malformed or out of range."""
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 0
    return value if 0 < value <= MAX_INT else 0
