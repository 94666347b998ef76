"""
Sanitizers - normalize raw query values before validation.
Every function here is total: any input yields a value, nothing raises.
"""

import math
import re
from collections.abc import Mapping
from html import unescape
from typing import Any

import nh3

_TRUE_TOKENS = frozenset({"1", "true", "yes", "on"})
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_OCTETS = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE = re.compile(r"[\r\n\t ]+")


_MAX_STRIP_PASSES = 8


def strip_tags(value: str) -> str:
    """
    Remove every HTML tag (and script/style content), leaving plain text.
    nh3 emits HTML-escaped text; it is decoded and cleaned again until stable,
    so entity-encoded markup ("&lt;b&gt;") cannot come back out as a tag.
    """
    text = value
    for _ in range(_MAX_STRIP_PASSES):
        if not text:
            return text
        cleaned = unescape(nh3.clean(text, tags=set(), attributes={}))
        if cleaned == text:
            return cleaned
        text = cleaned
    # Still changing after the pass budget: hand back the escaped form, never live markup
    return nh3.clean(text, tags=set(), attributes={})


def text_normalize(value: Any) -> str:
    """Single-line plain text: no tags, no percent-encoded octets, collapsed whitespace."""
    if isinstance(value, (dict, list, tuple, set)) or value is None:
        return ""
    if isinstance(value, bool):
        value = "1" if value else ""
    text = strip_tags(str(value))
    text = _OCTETS.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def absint(value: Any) -> int:
    """Non-negative integer from the leading digits of value ("12abc" -> 12, "abc" -> 0, "-5" -> 5)."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return abs(value)
    if isinstance(value, float):
        return abs(int(value)) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return abs(int(match.group(1))) if match else 0
    return 0


def to_bool(value: Any) -> bool:
    """True only for int/str/bool values that read as a truthy token ("1", "true", "yes", "on")."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_TOKENS
    return False


def clamp_to_max(value: Any, maximum: int = 50) -> int:
    """Coerce to a non-negative int and cap it at maximum (posts_per_page guard against huge pages)."""
    return min(absint(value), absint(maximum))


def comma_or_single_to_list(value: Any) -> Any:
    """
    "1,2,3" -> ["1", "2", "3"]; "5" -> ["5"]; anything else is returned unchanged.
    The scalar passthrough for non-numeric input is relied on by existing clients.
    """
    if isinstance(value, str) and "," in value:
        return value.split(",")
    if not isinstance(value, (list, tuple, dict)) and absint(value) > 0:
        return [value]
    return value


def _strip_nested(value: Any) -> Any:
    if isinstance(value, str):
        return strip_tags(value)
    if isinstance(value, Mapping):
        return {key: _strip_nested(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_strip_nested(item) for item in value]
    return value


def strip_tags_over_map(value: Any) -> Any:
    """
    Strip tags from every string in a mapping, nested lists and mappings included.
    Keys are untouched; non-mappings pass through.
    """
    if not isinstance(value, Mapping):
        return value
    return _strip_nested(value)
