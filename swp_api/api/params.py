"""
Query-string decoding for the search endpoint.
Bracket notation builds nested values: tax_query[taxonomy]=genre -> {"tax_query": {"taxonomy": "genre"}},
post__in[]=1&post__in[]=2 -> {"post__in": ["1", "2"]}. A repeated plain key keeps its last value.
"""

import re
from collections.abc import Iterable
from typing import Any

_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str]:
    match = _KEY.match(key)
    if not match:
        return [key]
    return [match.group(1), *_SEGMENT.findall(match.group(2))]


def _assign(container: dict[str, Any] | list[Any], path: list[str], value: str) -> None:
    head, rest = path[0], path[1:]
    if isinstance(container, list):
        if not rest:
            container.append(value)
            return
        child: dict[str, Any] | list[Any] = [] if rest[0] == "" else {}
        container.append(child)
        _assign(child, rest, value)
        return
    if not rest:
        container[head] = value
        return
    wanted = list if rest[0] == "" else dict
    child = container.get(head)
    if not isinstance(child, wanted):
        child = wanted()
        container[head] = child
    _assign(child, rest, value)


def parse_query_params(items: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Decode (key, value) pairs, in order, into the raw search request mapping."""
    params: dict[str, Any] = {}
    for key, value in items:
        path = _split_key(key)
        if path[0] == "":
            continue
        _assign(params, path, value)
    return params
