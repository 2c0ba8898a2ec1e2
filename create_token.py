"""Print a development bearer token for the given e-mail address.

Usage:
    python create_token.py admin@example.com
"""
import sys

from developer_portal_api.app.core.config import settings
from developer_portal_api.app.core.security import create_access_token

email = sys.argv[1] if len(sys.argv) > 1 else "admin@example.com"
# Valid for 365 days (seconds)
token = create_access_token({"emails": [email]}, settings.secret_key, expires_delta=365 * 24 * 60 * 60)
print(token)
