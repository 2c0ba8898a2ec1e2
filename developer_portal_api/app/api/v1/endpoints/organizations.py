"""
Organization endpoints for API v1.

Only logo upload is exposed; organization data is edited through the
services that belong to the organization.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from developer_portal_api.app.api.deps import get_service_admin
from developer_portal_api.app.api.responses import to_response
from developer_portal_api.app.core.security import get_authenticated_caller
from developer_portal_api.app.schemas.service import Logo
from developer_portal_api.app.schemas.user import AuthenticatedCaller
from developer_portal_api.app.services.service_admin_service import ServiceAdminService


router = APIRouter()


@router.put("/{organization_fiscal_code}/logo")
async def upload_organization_logo(
    logo: Logo,
    organization_fiscal_code: str = Path(..., min_length=1),
    caller: AuthenticatedCaller = Depends(get_authenticated_caller),
    service_admin: ServiceAdminService = Depends(get_service_admin),
) -> JSONResponse:
    """Upload the logo of an organization (admin only)."""
    return to_response(
        await service_admin.upload_organization_logo(caller, organization_fiscal_code, logo)
    )
