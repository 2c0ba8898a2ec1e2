"""
Information endpoint for API v1.

Returns the name and version of the running application.  The route
is public so it can be used as a liveness check.
"""

from typing import Dict

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/")
async def get_info(request: Request) -> Dict[str, str]:
    settings = request.app.state.settings
    return {"name": settings.project_name, "version": settings.api_version}
