"""
Top‑level router for version 1 of the API.

This router aggregates the resource routers under a unified prefix.
When new endpoints are added, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import info, organizations, services

router = APIRouter()

router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(organizations.router, prefix="/organizations", tags=["organizations"])
router.include_router(info.router, prefix="/info", tags=["info"])
