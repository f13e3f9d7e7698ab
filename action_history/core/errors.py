"""
Error taxonomy for the action history service.

Every error renders as a problem document: {type, title, status, detail}.
"""

from typing import Any, Dict

PROBLEM_TYPE = "about:blank"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class HistoryError(Exception):
    """Base class for errors surfaced to callers as problem documents."""
    status = 500
    title = "Internal Server Error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_problem(self) -> Dict[str, Any]:
        return problem(self.status, self.title, self.detail)


class Unauthenticated(HistoryError):
    """Identity assertion missing, empty or unparseable."""
    status = 401
    title = "Unauthorized"


class Forbidden(HistoryError):
    """Requested userId does not belong to the caller."""
    status = 403
    title = "Forbidden access"


class ValidationError(HistoryError):
    """Malformed pagination or request input."""
    status = 400
    title = "Bad Request"


class StoreFailure(HistoryError):
    """The store operation itself failed."""
    status = 500
    title = "Internal Server Error"


def problem(status: int, title: str, detail: str) -> Dict[str, Any]:
    """Build a problem document body."""
    return {
        "type": PROBLEM_TYPE,
        "title": title,
        "status": status,
        "detail": detail,
    }
