"""Shared FastAPI dependencies."""

from fastapi import Request

from ..services.service_admin_service import ServiceAdminService


def get_service_admin(request: Request) -> ServiceAdminService:
    """Return the ``ServiceAdminService`` built by ``create_app``."""
    return request.app.state.service_admin
