"""
Main entrypoint for the Developer Portal API.

This module assembles the FastAPI application, sets up logging, wires
the remote clients into the service layer and includes versioned
routers.  The ``create_app`` function builds and configures the app,
which is then instantiated at module import time as ``app``, e.g.::

    uvicorn developer_portal_api.app.main:app --reload
"""

from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .clients.apim import ApiManagementClient
from .clients.notification_api import NotificationApiClient
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .services.service_admin_service import ServiceAdminService


def build_service_admin(settings: Settings) -> ServiceAdminService:
    """Create the remote clients and the service layer from ``settings``."""
    apim = ApiManagementClient(
        base_url=settings.apim_base_url,
        api_version=settings.apim_api_version,
        token=settings.apim_token,
        admin_group=settings.apim_admin_group,
        timeout=settings.request_timeout,
    )
    notification_api = NotificationApiClient(
        base_url=settings.admin_api_url,
        api_key=settings.admin_api_key,
        timeout=settings.request_timeout,
    )
    return ServiceAdminService(settings, apim, notification_api)


def create_app(
    settings: Optional[Settings] = None,
    service_admin: Optional[ServiceAdminService] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time.
    service_admin : Optional[ServiceAdminService]
        Pre‑built service layer, mainly for tests.  Built from
        ``settings`` when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the wiring below
    # can log.
    setup_logging(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.service_admin = service_admin or build_service_admin(settings)

    app.include_router(v1_router, prefix="/api/v1")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
