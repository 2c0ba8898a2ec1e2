"""
Endpoint subpackage for API v1.

Each module in this package defines an APIRouter for a specific
resource.  The routers are aggregated in ``router.py``.
"""
