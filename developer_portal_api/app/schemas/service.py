"""
Pydantic models for service administration payloads.

``ServicePayload`` is the body of ``PUT /services/{service_id}``: a
partial update where every field is optional.  Only the fields the
caller actually sent take part in the merge with the stored record,
see ``ServicePayload.changes``.  ``Logo`` is the body of both logo
upload endpoints.

Service records returned by the notification backend are passed
around as plain dictionaries so unknown fields survive an update.
"""

import base64
import binascii
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# Fields a non‑admin owner may change on their own service.
OWNER_EDITABLE_FIELDS = frozenset(
    {
        "department_name",
        "organization_fiscal_code",
        "organization_name",
        "service_name",
    }
)

MAX_ALLOWED_PAYMENT_AMOUNT = 9999999999

_CIDR_RE = re.compile(
    r"^([0-9]{1,3}\.){3}[0-9]{1,3}(/([0-9]|[1-2][0-9]|3[0-2]))?$"
)
_FISCAL_CODE_RE = re.compile(
    r"^[A-Z]{6}[0-9LMNPQRSTUV]{2}[ABCDEHLMPRST][0-9LMNPQRSTUV]{2}[A-Z][0-9LMNPQRSTUV]{3}[A-Z]$"
)
_ORGANIZATION_FISCAL_CODE_RE = re.compile(r"^[0-9]{11}$")


class ServiceScope(str, Enum):
    NATIONAL = "NATIONAL"
    LOCAL = "LOCAL"


class ServiceMetadata(BaseModel):
    """Descriptive metadata shown to citizens in the app."""

    scope: ServiceScope
    description: Optional[str] = None
    web_url: Optional[str] = None
    app_ios: Optional[str] = None
    app_android: Optional[str] = None
    tos_url: Optional[str] = None
    privacy_url: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    pec: Optional[str] = None
    cta: Optional[str] = None
    token_name: Optional[str] = None
    support_url: Optional[str] = None

    model_config = {"extra": "allow"}


class ServicePayload(BaseModel):
    """Partial update of a service.

    An explicit ``"is_visible": null`` is read as ``false``; leaving the
    key out keeps the stored value.
    """

    authorized_cidrs: Optional[List[str]] = Field(None, example=["192.168.1.0/24"])
    authorized_recipients: Optional[List[str]] = Field(None, example=["AAAAAA00A00A000A"])
    department_name: Optional[str] = Field(None, min_length=1, example="IT")
    is_visible: Optional[bool] = Field(None, example=True)
    max_allowed_payment_amount: Optional[int] = Field(None, ge=0, le=MAX_ALLOWED_PAYMENT_AMOUNT)
    organization_fiscal_code: Optional[str] = Field(None, example="00000000000")
    organization_name: Optional[str] = Field(None, min_length=1, example="Comune di Roma")
    service_metadata: Optional[ServiceMetadata] = None
    service_name: Optional[str] = Field(None, min_length=1, example="Tributi")

    @field_validator("is_visible", mode="before")
    @classmethod
    def _default_is_visible(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("authorized_cidrs")
    @classmethod
    def _check_cidrs(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        for cidr in value or []:
            if not _CIDR_RE.match(cidr):
                raise ValueError(f"'{cidr}' is not a valid CIDR")
        return value

    @field_validator("authorized_recipients")
    @classmethod
    def _check_recipients(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        for fiscal_code in value or []:
            if not _FISCAL_CODE_RE.match(fiscal_code):
                raise ValueError(f"'{fiscal_code}' is not a valid fiscal code")
        return value

    @field_validator("organization_fiscal_code")
    @classmethod
    def _check_organization_fiscal_code(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _ORGANIZATION_FISCAL_CODE_RE.match(value):
            raise ValueError("organization fiscal code must be 11 digits")
        return value

    def changes(self, owner_only: bool = False) -> Dict[str, Any]:
        """Return the fields the caller sent, ready to overlay a record.

        With ``owner_only`` the result is restricted to
        ``OWNER_EDITABLE_FIELDS``; anything else is dropped.
        """
        sent = self.model_dump(mode="json", exclude_unset=True)
        if owner_only:
            return {k: v for k, v in sent.items() if k in OWNER_EDITABLE_FIELDS}
        return sent


class Logo(BaseModel):
    """Base64 encoded PNG image."""

    logo: str = Field(..., min_length=1, example="iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg==")

    @field_validator("logo")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise ValueError("logo must be base64 encoded") from exc
        return value
