"""
Authorization pipeline shared by the service administration handlers.

A handler is an ordered list of *stages*.  Each stage is an async
callable receiving the value produced by the previous stage and
returning an :mod:`outcome <developer_portal_api.app.services.outcomes>`.
:func:`run_pipeline` runs the stages one after the other and stops at
the first error tag, so later stages (and their remote calls) never
run once a check has failed.

The generic stages live here:

* :func:`resolve_user` – caller → API management user.
* :func:`check_subscription` – user must own the service, unless admin.
* :func:`check_admin` – user must be an administrator.

Remote clients are blocking; :func:`call_remote` runs them in a worker
thread so the event loop is only suspended at remote call boundaries.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Tuple

from ..clients.apim import ApiManagementClient
from ..schemas.user import AuthenticatedCaller, ManagementUser
from .outcomes import Forbidden, InternalError, NotFound, Ok, Outcome


logger = logging.getLogger(__name__)

Stage = Callable[[Any], Awaitable[Outcome]]


async def run_pipeline(seed: Any, *stages: Stage) -> Outcome:
    """Feed ``seed`` through ``stages`` and return the final outcome.

    The first stage to return an error tag ends the run and its
    outcome is returned unchanged.
    """
    outcome: Outcome = Ok(seed)
    for stage in stages:
        outcome = await stage(outcome.value)
        if outcome.is_error:
            return outcome
    return outcome


async def call_remote(func: Callable[..., Tuple[Any, Any]], *args: Any) -> Tuple[Any, Any]:
    """Run a blocking client method without blocking the event loop."""
    return await asyncio.to_thread(func, *args)


def error_message(error: Any) -> str:
    """Message of a client error dictionary (or any other value)."""
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)


async def resolve_user(apim: ApiManagementClient, caller: AuthenticatedCaller) -> Outcome:
    """Look up the API management user of the caller's primary e‑mail."""
    try:
        user, error = await call_remote(apim.get_user_by_email, caller.primary_email)
    except Exception as exc:
        logger.exception("User lookup failed for %s", caller.primary_email)
        return InternalError(str(exc))
    if error:
        return InternalError(error_message(error))
    if user is None:
        logger.info("No API management user for %s", caller.primary_email)
        return NotFound(
            "API user not found",
            "Cannot find a user in the API management with the provided email address",
        )
    return Ok(user)


async def check_subscription(apim: ApiManagementClient, service_id: str, user: ManagementUser) -> Outcome:
    """Make sure ``user`` may act on ``service_id``.

    Administrators may act on any existing subscription; everyone else
    must own it.  A denial is reported as ``NotFound`` so that callers
    cannot find out which services exist.  On success the user is passed
    on to the next stage.
    """
    try:
        if user.is_admin:
            subscription, error = await call_remote(apim.get_subscription, service_id)
        else:
            subscription, error = await call_remote(apim.get_user_subscription, service_id, user.id)
    except Exception as exc:
        logger.exception("Subscription lookup failed for %s", service_id)
        return InternalError(str(exc))
    if error:
        return InternalError(error_message(error))
    if subscription is None:
        logger.info("User %s has no subscription %s", user.name, service_id)
        return NotFound("Subscription not found", "Cannot get a subscription for the logged in user")
    return Ok(user)


async def check_admin(user: ManagementUser) -> Outcome:
    """Pass administrators through, reject everybody else."""
    if user.is_admin:
        return Ok(user)
    logger.info("User %s is not an administrator", user.name)
    return Forbidden()
