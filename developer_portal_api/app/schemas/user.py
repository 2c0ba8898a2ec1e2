"""
Pydantic models for callers, API management users and subscriptions.

``AuthenticatedCaller`` is built from the verified bearer token.
``ManagementUser`` and ``Subscription`` are the parts of the API
management records the authorization pipeline relies on; they are
produced by ``clients.apim.ApiManagementClient``.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class AuthenticatedCaller(BaseModel):
    """Identity of the HTTP requester as asserted by the bearer token."""

    emails: List[str] = Field(..., min_length=1, example=["jane.doe@example.com"])
    oid: Optional[str] = Field(None, description="Object id in the identity provider")
    given_name: Optional[str] = None
    family_name: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def primary_email(self) -> str:
        return self.emails[0]


class ManagementUser(BaseModel):
    """User record of the API management service."""

    id: str = Field(..., example="/subscriptions/x/resourceGroups/y/providers/Microsoft.ApiManagement/service/z/users/jane")
    name: str = Field(..., example="jane")
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    # Lower‑cased group names the user belongs to.
    group_names: List[str] = Field(default_factory=list)
    # Computed by the client from ``group_names`` and the configured
    # admin group.
    is_admin: bool = False

    model_config = {"frozen": True}


class Subscription(BaseModel):
    """Subscription linking a user to a service.

    The subscription id doubles as the service id in the notification
    backend.
    """

    id: str
    name: str
    owner_id: Optional[str] = None
    display_name: Optional[str] = None
    state: Optional[str] = None

    model_config = {"frozen": True}
