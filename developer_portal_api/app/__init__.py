"""
Application package initializer.

This package contains the entrypoint for the developer portal backend
and its submodules.  Each concern lives in its own subpackage:
``clients`` talks to the remote API management and notification
backends, ``services`` holds the authorization pipeline and handler
flows, ``schemas`` the pydantic payloads and ``api`` the versioned
routers.
"""

from .main import app  # noqa: F401
