"""
Translate service outcomes into HTTP responses.

Successes become JSON (200) or a redirect to the created resource
(201 with a ``Location`` header).  Errors are returned as problem
documents (``application/problem+json``) with ``title``, ``detail``
and ``status``.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from ..services.outcomes import Forbidden, InternalError, JsonSuccess, NotFound, Outcome, RedirectSuccess


PROBLEM_JSON = "application/problem+json"


def _problem(status_code: int, title: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"title": title, "detail": detail, "status": status_code},
        media_type=PROBLEM_JSON,
    )


def to_response(outcome: Outcome) -> JSONResponse:
    """Build the HTTP response for a terminal outcome."""
    if isinstance(outcome, JsonSuccess):
        return JSONResponse(status_code=status.HTTP_200_OK, content=outcome.value)
    if isinstance(outcome, RedirectSuccess):
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={},
            headers={"Location": outcome.location},
        )
    if isinstance(outcome, NotFound):
        return _problem(status.HTTP_404_NOT_FOUND, outcome.title, outcome.detail)
    if isinstance(outcome, Forbidden):
        return _problem(status.HTTP_403_FORBIDDEN, outcome.title, outcome.detail)
    if isinstance(outcome, InternalError):
        return _problem(status.HTTP_500_INTERNAL_SERVER_ERROR, outcome.title, outcome.detail)
    # A bare Ok means a flow ended without a terminal stage
    return _problem(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        f"Unexpected outcome {type(outcome).__name__}",
    )
