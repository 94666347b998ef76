"""
Search errors - what a request can be rejected with.
The API layer maps these to structured JSON responses (see core/exception_handlers.py).
"""

from typing import Any


class SearchAPIError(Exception):
    """Base error for rejected search requests. Carries code, message and HTTP status."""

    code = "search-error"
    status_code = 400

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Error body: machine-readable code, human-readable message, status plus details."""
        return {
            "code": self.code,
            "message": self.message,
            "data": {"status": self.status_code, **self.details},
        }


class Forbidden(SearchAPIError):
    """Permission gate denied the request."""

    code = "forbidden"
    status_code = 403

    def __init__(self, message: str = "Sorry, you are not allowed to search.") -> None:
        super().__init__(message)


class InvalidEngine(SearchAPIError):
    """Requested engine is not known to the engine registry."""

    code = "invalid-search-engine"

    def __init__(self, engine: str) -> None:
        super().__init__("Invalid search engine", details={"engine": engine})


class InvalidArgument(SearchAPIError):
    """A parameter failed its validator and has no fallback value."""

    code = "invalid-argument"

    def __init__(self, param: str) -> None:
        super().__init__(f"Invalid parameter: {param}", details={"param": param})


class MalformedSubQuery(SearchAPIError):
    """
    A tax/meta/date sub-query lacks required keys.
    Never raised: the dispatcher builds one to describe the degraded filter in its log line,
    then substitutes an empty filter.
    """

    code = "malformed-sub-query"

    def __init__(self, param: str, missing: list[str]) -> None:
        super().__init__(
            f"Malformed {param}: missing {', '.join(missing) or 'structure'}",
            details={"param": param, "missing": missing},
        )
