"""
Service endpoints for API v1.

These routes let the owner of a service (or a portal administrator)
read and update it, and let administrators upload its logo.  The
authorization checks happen in ``ServiceAdminService``; handlers only
map the resulting outcome to a response.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from developer_portal_api.app.api.deps import get_service_admin
from developer_portal_api.app.api.responses import to_response
from developer_portal_api.app.core.security import get_authenticated_caller
from developer_portal_api.app.schemas.service import Logo, ServicePayload
from developer_portal_api.app.schemas.user import AuthenticatedCaller
from developer_portal_api.app.services.service_admin_service import ServiceAdminService


router = APIRouter()


@router.get("/{service_id}")
async def get_service(
    service_id: str = Path(..., min_length=1),
    caller: AuthenticatedCaller = Depends(get_authenticated_caller),
    service_admin: ServiceAdminService = Depends(get_service_admin),
) -> JSONResponse:
    """Retrieve a service.

    Returns 404 both when the service does not exist and when the
    caller does not own it.
    """
    return to_response(await service_admin.get_service(caller, service_id))


@router.put("/{service_id}")
async def update_service(
    payload: ServicePayload,
    service_id: str = Path(..., min_length=1),
    caller: AuthenticatedCaller = Depends(get_authenticated_caller),
    service_admin: ServiceAdminService = Depends(get_service_admin),
) -> JSONResponse:
    """Update a service.

    Partial updates are supported; any unspecified fields remain
    unchanged.  Owners that are not administrators may only change
    the service, department and organization names and the
    organization fiscal code; other fields are ignored.
    """
    return to_response(await service_admin.update_service(caller, service_id, payload))


@router.put("/{service_id}/logo")
async def upload_service_logo(
    logo: Logo,
    service_id: str = Path(..., min_length=1),
    caller: AuthenticatedCaller = Depends(get_authenticated_caller),
    service_admin: ServiceAdminService = Depends(get_service_admin),
) -> JSONResponse:
    """Upload the logo of a service (admin only).

    On success the response is 201 with the public URL of the logo in
    the ``Location`` header.
    """
    return to_response(await service_admin.upload_service_logo(caller, service_id, logo))
