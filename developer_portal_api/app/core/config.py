"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field so the
application can start (and be tested) without a ``.env`` file; in a
production deployment the URLs and keys must be overridden.

Settings are resolved once at process start and then handed to the
clients and the service layer explicitly (see ``main.create_app``).
"""

import os
from dataclasses import dataclass, field


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: _env("PROJECT_NAME", "Developer Portal API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    # Optional path of a log file; console logging is always enabled.
    log_file: str = field(default_factory=lambda: _env("LOG_FILE", ""))

    # Secret used to sign and verify bearer tokens.
    secret_key: str = field(default_factory=lambda: _env("SECRET_KEY", "change_me"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(_env("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    )

    # Downstream notification admin API.  ``admin_api_url`` already
    # contains the ``/adm`` base path.
    admin_api_url: str = field(default_factory=lambda: _env("ADMIN_API_URL", "http://localhost:7071/adm"))
    admin_api_key: str = field(default_factory=lambda: _env("ADMIN_API_KEY", ""))

    # Public base URL where uploaded logos are served from.
    logo_url: str = field(default_factory=lambda: _env("LOGO_URL", "http://localhost:7071/logos"))

    # API management service, addressed by its full ARM resource URL, e.g.
    # https://management.azure.com/subscriptions/<id>/resourceGroups/<rg>
    # /providers/Microsoft.ApiManagement/service/<name>
    apim_base_url: str = field(default_factory=lambda: _env("APIM_BASE_URL", "http://localhost:7072"))
    apim_api_version: str = field(default_factory=lambda: _env("APIM_API_VERSION", "2019-12-01"))
    apim_token: str = field(default_factory=lambda: _env("APIM_TOKEN", ""))
    # Users in this group are portal administrators.  Compared
    # case‑insensitively.
    apim_admin_group: str = field(default_factory=lambda: _env("APIM_ADMIN_GROUP", "apiadmin"))

    # Timeout in seconds for every outgoing HTTP request.
    request_timeout: float = field(default_factory=lambda: float(_env("REQUEST_TIMEOUT", "15")))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Tests build their own
# ``Settings`` instances and pass them to ``create_app``.
settings = Settings()
