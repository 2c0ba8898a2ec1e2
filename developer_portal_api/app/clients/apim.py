"""
API management client.

Resolves portal callers to API management users and looks up the
subscriptions that link users to services.  The client speaks the
Azure Resource Manager REST dialect of API management: resources are
addressed relative to the service resource URL and carry their data
in a ``properties`` object.

* :meth:`ApiManagementClient.get_user_by_email` – find a user and its groups.
* :meth:`ApiManagementClient.get_subscription` – fetch a subscription.
* :meth:`ApiManagementClient.get_user_subscription` – fetch a subscription
  only if it is owned by the given user.

Like :mod:`notification_api`, every method returns ``(data, error)``.
A missing user or subscription is ``(None, None)``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from ..schemas.user import ManagementUser, Subscription


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class ApiManagementClient:
    """Client for the API management REST interface."""

    def __init__(
        self,
        *,
        base_url: str,
        api_version: str,
        token: str = "",
        admin_group: str = "apiadmin",
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Resource URL of the API management service.
            api_version: Value of the ``api-version`` query parameter.
            token: Bearer token for the management plane.  Omitted from
                requests when empty.
            admin_group: Name of the group whose members are portal
                administrators.
            timeout: Per‑request timeout in seconds.
            session: Optional requests session shared by all threads.
                Each thread creates its own when omitted.
        """
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.token = token
        self.admin_group = admin_group.lower()
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

    def _get(
        self, path: str, params: Dict[str, str] | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Perform a GET request.

        Returns:
            ``(data, None)`` on success, ``(None, None)`` on a 404 reply
            and ``(None, error)`` on any other failure.
        """
        url = f"{self.base_url}{path}"
        query = {"api-version": self.api_version}
        query.update(params or {})
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending GET request to %s", url)
            response = self.session.get(url, params=query, headers=headers, timeout=self.timeout)
            if response.status_code == 404:
                return None, None
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = exc.response.text if exc.response is not None and exc.response.text else str(exc)
            logger.error("API management request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API management request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        except ValueError:
            return None, {"status_code": response.status_code, "message": "Response is not valid JSON"}
        return data, None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user_by_email(self, email: str) -> Tuple[Optional[ManagementUser], Optional[ApiError]]:
        """Return the user registered with ``email`` together with its groups."""
        # OData string literals escape quotes by doubling them
        odata_email = email.replace("'", "''")
        data, error = self._get("/users", {"$filter": f"email eq '{odata_email}'"})
        if error or not data:
            return None, error
        users = data.get("value") or []
        if not users:
            return None, None
        raw_user = users[0]
        user_name = raw_user.get("name")
        if not user_name:
            return None, None
        group_names, error = self._get_group_names(user_name)
        if error:
            return None, error
        properties = raw_user.get("properties") or {}
        user = ManagementUser(
            id=raw_user.get("id") or user_name,
            name=user_name,
            email=properties.get("email") or email,
            first_name=properties.get("firstName"),
            last_name=properties.get("lastName"),
            group_names=group_names,
            is_admin=self.admin_group in group_names,
        )
        return user, None

    def _get_group_names(self, user_name: str) -> Tuple[List[str], Optional[ApiError]]:
        data, error = self._get(f"/users/{quote(user_name, safe='')}/groups")
        if error:
            return [], error
        names = []
        for group in (data or {}).get("value") or []:
            properties = group.get("properties") or {}
            name = group.get("name") or properties.get("displayName")
            if name:
                names.append(name.lower())
        return names, None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def get_subscription(self, subscription_id: str) -> Tuple[Optional[Subscription], Optional[ApiError]]:
        """Return the subscription with the given id, whoever owns it."""
        data, error = self._get(f"/subscriptions/{quote(subscription_id, safe='')}")
        if error or not data:
            return None, error
        if not data.get("name"):
            return None, None
        properties = data.get("properties") or {}
        subscription = Subscription(
            id=data.get("id") or data["name"],
            name=data["name"],
            # Older api versions call the owner ``userId``
            owner_id=properties.get("ownerId") or properties.get("userId"),
            display_name=properties.get("displayName"),
            state=properties.get("state"),
        )
        return subscription, None

    def get_user_subscription(
        self, subscription_id: str, user_id: str
    ) -> Tuple[Optional[Subscription], Optional[ApiError]]:
        """Return the subscription only if ``user_id`` owns it."""
        subscription, error = self.get_subscription(subscription_id)
        if error or subscription is None:
            return None, error
        if subscription.owner_id != user_id:
            logger.info("Subscription %s is not owned by %s", subscription_id, user_id)
            return None, None
        return subscription, None
