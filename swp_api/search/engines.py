"""
Search engine registry and the engine interface the dispatcher talks to.
Engines are named backends; each name maps to one Elasticsearch index.
"""

from collections.abc import Mapping
from typing import Any, Protocol


class SearchEngine(Protocol):
    """Anything that runs a clean argument set and returns ordered raw hits."""

    async def search(self, args: dict[str, Any]) -> list[dict[str, Any]]: ...


class EngineRegistry:
    """Known engines (name -> index). Read-only after construction, safe to share across requests."""

    def __init__(self, engines: Mapping[str, str]):
        self._engines = dict(engines)

    def is_valid_engine(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._engines

    def index_for(self, name: str) -> str:
        """Index backing an engine. Raises KeyError for unknown engines."""
        return self._engines[name]

    def names(self) -> list[str]:
        return sorted(self._engines)
