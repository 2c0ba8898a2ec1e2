"""
Business logic for service administration.

``ServiceAdminService`` implements the four handler flows of the
portal on top of :func:`pipeline.run_pipeline`:

* ``get_service`` – owner or admin reads a service.
* ``update_service`` – owner or admin patches a service.  Owners may
  only change the fields in ``OWNER_EDITABLE_FIELDS``.
* ``upload_service_logo`` / ``upload_organization_logo`` – admins
  upload a logo and are redirected to its public URL.

Every method returns an outcome; the API layer turns it into an HTTP
response.
"""

import logging
from functools import partial
from typing import Any, Callable, Dict, Optional, Tuple

from ..clients.apim import ApiManagementClient
from ..clients.notification_api import NotificationApiClient
from ..core.config import Settings
from ..schemas.service import Logo, ServicePayload
from ..schemas.user import AuthenticatedCaller, ManagementUser
from .outcomes import InternalError, JsonSuccess, NotFound, Ok, Outcome, RedirectSuccess
from .pipeline import call_remote, check_admin, check_subscription, error_message, resolve_user, run_pipeline


logger = logging.getLogger(__name__)

# (identifier, base64 logo) -> (status_code, error)
LogoUpload = Callable[[str, str], Tuple[Optional[int], Optional[Dict[str, Any]]]]

SERVICE_NOT_FOUND = NotFound("Service not found", "Cannot get a service with the provided id.")


class ServiceAdminService:
    """Handler flows for services and their logos."""

    def __init__(
        self,
        settings: Settings,
        apim: ApiManagementClient,
        notification_api: NotificationApiClient,
    ) -> None:
        self.settings = settings
        self.apim = apim
        self.notification_api = notification_api

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------
    async def get_service(self, caller: AuthenticatedCaller, service_id: str) -> Outcome:
        """Return the service record if the caller owns it or is an admin."""

        async def respond(user: ManagementUser) -> Outcome:
            outcome = await self._fetch_service(service_id)
            if outcome.is_error:
                return outcome
            return JsonSuccess(outcome.value)

        return await run_pipeline(
            caller,
            partial(resolve_user, self.apim),
            partial(check_subscription, self.apim, service_id),
            respond,
        )

    async def update_service(
        self, caller: AuthenticatedCaller, service_id: str, payload: ServicePayload
    ) -> Outcome:
        """Patch a service with the fields sent in ``payload``.

        The payload is overlaid on the stored record, so omitted fields
        keep their values.  Fields an owner may not edit are dropped
        silently when the caller is not an admin.
        """

        async def fetch(user: ManagementUser) -> Outcome:
            outcome = await self._fetch_service(service_id)
            if outcome.is_error:
                return outcome
            return Ok((user, outcome.value))

        async def submit(user_and_service: Tuple[ManagementUser, Dict[str, Any]]) -> Outcome:
            user, service = user_and_service
            changes = payload.changes(owner_only=not user.is_admin)
            merged = {**service, **changes}
            logger.debug("updating service %s", merged)
            try:
                updated, error = await call_remote(self.notification_api.update_service, service_id, merged)
            except Exception as exc:
                logger.exception("Update of service %s failed", service_id)
                return InternalError(f"Error updating service: {exc}")
            if error:
                return InternalError(f"Error updating service: {error_message(error)}")
            logger.info("Service %s updated by %s", service_id, user.name)
            return JsonSuccess(updated)

        return await run_pipeline(
            caller,
            partial(resolve_user, self.apim),
            partial(check_subscription, self.apim, service_id),
            fetch,
            submit,
        )

    async def _fetch_service(self, service_id: str) -> Outcome:
        try:
            service, error = await call_remote(self.notification_api.get_service, service_id)
        except Exception:
            logger.exception("Fetch of service %s failed", service_id)
            return SERVICE_NOT_FOUND
        if error or service is None:
            return SERVICE_NOT_FOUND
        return Ok(service)

    # ------------------------------------------------------------------
    # Logos
    # ------------------------------------------------------------------
    async def upload_service_logo(self, caller: AuthenticatedCaller, service_id: str, logo: Logo) -> Outcome:
        """Upload the logo of a service (admins only)."""
        return await run_pipeline(
            caller,
            partial(resolve_user, self.apim),
            check_admin,
            partial(self._upload_logo, self.notification_api.upload_service_logo, service_id, logo),
        )

    async def upload_organization_logo(
        self, caller: AuthenticatedCaller, organization_fiscal_code: str, logo: Logo
    ) -> Outcome:
        """Upload the logo of an organization (admins only)."""
        return await run_pipeline(
            caller,
            partial(resolve_user, self.apim),
            check_admin,
            partial(self._upload_logo, self.notification_api.upload_organization_logo, organization_fiscal_code, logo),
        )

    async def _upload_logo(
        self, upload: LogoUpload, identifier: str, logo: Logo, user: ManagementUser
    ) -> Outcome:
        try:
            status_code, error = await call_remote(upload, identifier, logo.logo)
        except Exception as exc:
            logger.exception("Logo upload for %s failed", identifier)
            return InternalError(str(exc))
        if error:
            return InternalError(error_message(error))
        if status_code != 201:
            return InternalError(f"Unexpected status code {status_code} while uploading the logo")
        logger.info("Logo for %s uploaded by %s", identifier, user.name)
        return RedirectSuccess(self.logo_location(identifier))

    def logo_location(self, identifier: str) -> str:
        """Public URL of the logo stored for ``identifier``.

        Service and organization logos share the same URL template.
        """
        return f"{self.settings.logo_url}/services/{identifier}.png"
