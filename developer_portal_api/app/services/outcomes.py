"""
Tagged results produced by the authorization pipeline.

Every pipeline stage returns one of these values.  ``Ok`` carries the
value handed to the next stage; ``JsonSuccess`` and ``RedirectSuccess``
are the two terminal success shapes.  ``NotFound``, ``Forbidden`` and
``InternalError`` stop the pipeline.
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    value: Any
    is_error = False


@dataclass(frozen=True)
class JsonSuccess(Ok):
    """Return ``value`` as the JSON body of a 200 response."""


@dataclass(frozen=True)
class RedirectSuccess(Ok):
    """Point the client at a freshly created resource.

    ``value`` is the resource location.
    """

    @property
    def location(self) -> str:
        return self.value


@dataclass(frozen=True)
class NotFound:
    title: str
    detail: str
    is_error = True


@dataclass(frozen=True)
class Forbidden:
    title: str = "You are not allowed here"
    detail: str = "You do not have enough permission to complete the operation you requested"
    is_error = True


@dataclass(frozen=True)
class InternalError:
    detail: str
    title: str = "Internal server error"
    is_error = True


Failure = Union[NotFound, Forbidden, InternalError]
Outcome = Union[Ok, Failure]
