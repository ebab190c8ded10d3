"""
# Paste-Transform: utilities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Common utility functions.
"""

from typing import Any, Optional


def none_to_empty_string(string: Optional[str]) -> str:
    if string is None:
        return ''

    return string


def is_record(value: Any) -> bool:
    """
    Whether a value is a structured `{id, text}` record (as opposed to a raw legacy string).
    """
    return isinstance(value, dict) and 'text' in value


def coerce_to_text(value: Any) -> str:
    """
    Coerce a legacy array entry to text.

    Strings are kept, records contribute their `text`, `None` becomes the empty string,
    and any other scalar is stringified.
    """
    if isinstance(value, str):
        return value

    if isinstance(value, dict):
        return coerce_to_text(value.get('text'))

    if value is None:
        return ''

    return str(value)


def coerce_with_default(value: Any, default: Any) -> Any:
    """
    Return `value` if it has the same type as `default`, otherwise `default`.

    The type check is exact, so that `0` and `1` are not mistaken for booleans.
    """
    if type(value) is type(default):
        return value

    return default
