"""Shared fixtures: fake remote clients and a configured service layer."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from developer_portal_api.app.core.config import Settings
from developer_portal_api.app.schemas.user import AuthenticatedCaller, ManagementUser, Subscription
from developer_portal_api.app.services.service_admin_service import ServiceAdminService


LOGO_URL = "https://assets.example.com/logos"

ADMIN = ManagementUser(
    id="/service/apim/users/admin",
    name="admin",
    email="admin@example.com",
    group_names=["apiadmin", "developers"],
    is_admin=True,
)
OWNER = ManagementUser(
    id="/service/apim/users/owner",
    name="owner",
    email="owner@example.com",
    group_names=["developers"],
    is_admin=False,
)

STORED_SERVICE = {
    "service_id": "S1",
    "service_name": "Foo",
    "department_name": "IT",
    "organization_name": "Comune di Prova",
    "organization_fiscal_code": "12345678901",
    "authorized_cidrs": ["10.0.0.0/8"],
    "authorized_recipients": [],
    "is_visible": False,
    "max_allowed_payment_amount": 1000,
    "version": 3,
}


class FakeApim:
    """In‑memory stand‑in for ``ApiManagementClient``."""

    def __init__(self, users: Dict[str, ManagementUser], subscriptions: Dict[str, Subscription]):
        self.users = users
        self.subscriptions = subscriptions
        self.calls: List[Tuple[str, tuple]] = []
        self.error: Optional[Dict[str, Any]] = None
        self.subscription_error: Optional[Dict[str, Any]] = None

    def get_user_by_email(self, email):
        self.calls.append(("get_user_by_email", (email,)))
        if self.error:
            return None, self.error
        return self.users.get(email), None

    def get_subscription(self, subscription_id):
        self.calls.append(("get_subscription", (subscription_id,)))
        if self.subscription_error:
            return None, self.subscription_error
        return self.subscriptions.get(subscription_id), None

    def get_user_subscription(self, subscription_id, user_id):
        self.calls.append(("get_user_subscription", (subscription_id, user_id)))
        if self.subscription_error:
            return None, self.subscription_error
        subscription = self.subscriptions.get(subscription_id)
        if subscription is None or subscription.owner_id != user_id:
            return None, None
        return subscription, None


class FakeNotificationApi:
    """In‑memory stand‑in for ``NotificationApiClient``."""

    def __init__(self, services: Dict[str, Dict[str, Any]]):
        self.services = services
        self.calls: List[Tuple[str, tuple]] = []
        self.upload_status = 201
        self.update_error: Optional[Dict[str, Any]] = None
        self.raise_on_update: Optional[Exception] = None
        self.raise_on_upload: Optional[Exception] = None

    def get_service(self, service_id):
        self.calls.append(("get_service", (service_id,)))
        service = self.services.get(service_id)
        if service is None:
            return None, {"status_code": 404, "message": "Not found"}
        return dict(service), None

    def update_service(self, service_id, service):
        self.calls.append(("update_service", (service_id, service)))
        if self.raise_on_update:
            raise self.raise_on_update
        if self.update_error:
            return None, self.update_error
        self.services[service_id] = service
        return dict(service), None

    def upload_service_logo(self, service_id, logo):
        return self._upload("upload_service_logo", service_id, logo)

    def upload_organization_logo(self, organization_fiscal_code, logo):
        return self._upload("upload_organization_logo", organization_fiscal_code, logo)

    def _upload(self, name, identifier, logo):
        self.calls.append((name, (identifier, logo)))
        if self.raise_on_upload:
            raise self.raise_on_upload
        return self.upload_status, None


@pytest.fixture
def settings() -> Settings:
    return Settings(secret_key="test-secret", logo_url=LOGO_URL, log_level="WARNING")


@pytest.fixture
def apim() -> FakeApim:
    return FakeApim(
        users={ADMIN.email: ADMIN, OWNER.email: OWNER},
        subscriptions={
            "S1": Subscription(id="/service/apim/subscriptions/S1", name="S1", owner_id=OWNER.id),
            "S3": Subscription(id="/service/apim/subscriptions/S3", name="S3", owner_id="/service/apim/users/other"),
        },
    )


@pytest.fixture
def notification_api() -> FakeNotificationApi:
    return FakeNotificationApi(
        services={
            "S1": dict(STORED_SERVICE),
            "S3": dict(STORED_SERVICE, service_id="S3", service_name="Bar"),
        }
    )


@pytest.fixture
def service_admin(settings, apim, notification_api) -> ServiceAdminService:
    return ServiceAdminService(settings, apim, notification_api)


@pytest.fixture
def admin_caller() -> AuthenticatedCaller:
    return AuthenticatedCaller(emails=[ADMIN.email])


@pytest.fixture
def owner_caller() -> AuthenticatedCaller:
    return AuthenticatedCaller(emails=[OWNER.email, "owner.alt@example.com"])


@pytest.fixture
def unknown_caller() -> AuthenticatedCaller:
    return AuthenticatedCaller(emails=["nobody@example.com"])
