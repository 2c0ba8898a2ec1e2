"""
Notification admin API client.

Thin wrapper around the administrative REST API of the notification
backend.  It exposes exactly the operations the portal needs:

* :meth:`NotificationApiClient.get_service` – fetch a service record.
* :meth:`NotificationApiClient.update_service` – replace a service record.
* :meth:`NotificationApiClient.upload_service_logo` – store a service logo.
* :meth:`NotificationApiClient.upload_organization_logo` – store an
  organization logo.

Requests are authenticated with the ``Ocp-Apim-Subscription-Key``
header.  The client uses the blocking ``requests`` library; the
service layer runs its methods in a worker thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class NotificationApiClient:
    """Client for the notification backend admin API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the admin API, including its base path
                (e.g. ``https://api.example.com/adm``).
            api_key: Subscription key sent with every request.
            timeout: Per‑request timeout in seconds.
            session: Optional requests session shared by all threads.
                Each thread creates its own when omitted.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """Session used for outgoing requests.

        An injected session is used as is.  Otherwise every worker thread
        gets its own ``requests.Session``, which is not safe to share
        between threads.
        """
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[requests.Response], Optional[ApiError]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(response, error)``.  On a 2xx reply ``response``
            is set and ``error`` is ``None``.  Otherwise ``response`` is
            ``None`` and ``error`` is a dictionary with the keys
            ``status_code`` and ``message``.
        """
        url = f"{self.base_url}{path}"
        headers = {"Ocp-Apim-Subscription-Key": self.api_key}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = _error_message(exc)
            logger.error("Notification API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("Notification API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _json(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        response, error = self._request(method, path, json_body=json_body)
        if error:
            return None, error
        try:
            data = response.json()
        except ValueError:
            return None, {"status_code": response.status_code, "message": "Response is not valid JSON"}
        if not isinstance(data, dict):
            return None, {"status_code": response.status_code, "message": "Unexpected response body"}
        return data, None

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------
    def get_service(self, service_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve a service record by id."""
        return self._json("GET", f"/services/{quote(service_id, safe='')}")

    def update_service(
        self, service_id: str, service: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Replace the stored service record with ``service``.

        Returns the record as stored by the backend.
        """
        return self._json("PUT", f"/services/{quote(service_id, safe='')}", json_body=service)

    # ------------------------------------------------------------------
    # Logos
    # ------------------------------------------------------------------
    def upload_service_logo(self, service_id: str, logo: str) -> Tuple[Optional[int], Optional[ApiError]]:
        """Upload the base64 encoded logo of a service.

        Returns:
            A tuple ``(status_code, error)``.
        """
        return self._upload(f"/services/{quote(service_id, safe='')}/logo", logo)

    def upload_organization_logo(
        self, organization_fiscal_code: str, logo: str
    ) -> Tuple[Optional[int], Optional[ApiError]]:
        """Upload the base64 encoded logo of an organization.

        Returns:
            A tuple ``(status_code, error)``.
        """
        return self._upload(f"/organizations/{quote(organization_fiscal_code, safe='')}/logo", logo)

    def _upload(self, path: str, logo: str) -> Tuple[Optional[int], Optional[ApiError]]:
        response, error = self._request("PUT", path, json_body={"logo": logo})
        if error:
            return None, error
        return response.status_code, None


def _error_message(exc: requests.HTTPError) -> str:
    """Extract a readable message from an error reply.

    The backend answers with problem documents carrying ``detail`` and
    ``title``; fall back to the raw text or the exception itself.
    """
    message = ""
    if exc.response is not None:
        try:
            err_json = exc.response.json()
            if isinstance(err_json, dict):
                message = err_json.get("detail") or err_json.get("title") or err_json.get("message") or str(err_json)
            else:
                message = str(err_json)
        except ValueError:
            message = exc.response.text
    return message or str(exc)
