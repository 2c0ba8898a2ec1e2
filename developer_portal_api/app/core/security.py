"""
Security helpers for bearer token authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed
the caller's claims and an expiration timestamp (``exp``).  The
secret key from the application settings is used to sign and verify
the token.

The portal only needs to know *who* is calling: the ``emails`` claim
is turned into an ``AuthenticatedCaller``.  Authorization (ownership
or admin checks) happens later in the service layer against the API
management records.
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..schemas.user import AuthenticatedCaller
from .config import Settings


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], secret_key: str, expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"emails": ["a@b.it"]}``).
    secret_key : str
        Secret used for the HS256 signature.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to one day.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    to_encode = data.copy()
    to_encode["exp"] = int(time.time()) + (expires_delta or 24 * 60 * 60)
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret_key: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the signature is valid and the
    token is not expired, otherwise ``None``.
    """
    try:
        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, secret_key)
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if data.get("exp") is None or int(data["exp"]) < int(time.time()):
            return None
        return data
    except (ValueError, TypeError):
        # Malformed base64 or JSON
        return None


def caller_from_claims(claims: Dict[str, Any]) -> Optional[AuthenticatedCaller]:
    """Build an ``AuthenticatedCaller`` from token claims.

    Identity providers differ in how they report the e‑mail address:
    B2C tenants send an ``emails`` list, others a single ``email``.
    Both are accepted; ``None`` is returned when neither is present.
    """
    emails = claims.get("emails")
    if not emails and claims.get("email"):
        emails = [claims["email"]]
    if not isinstance(emails, list) or not emails:
        return None
    return AuthenticatedCaller(
        emails=[str(e) for e in emails],
        oid=claims.get("oid"),
        given_name=claims.get("given_name"),
        family_name=claims.get("family_name"),
    )


security = HTTPBearer(auto_error=False)


def get_authenticated_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedCaller:
    """Dependency that returns the caller of the current request.

    Raises HTTP 401 when the ``Authorization`` header is missing, the
    token is invalid or expired, or it carries no e‑mail address.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    settings: Settings = request.app.state.settings
    claims = decode_access_token(credentials.credentials, settings.secret_key)
    if not claims:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    caller = caller_from_claims(claims)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token does not carry an e-mail address",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller
