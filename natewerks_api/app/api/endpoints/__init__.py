"""
Endpoint modules.

Each module defines an APIRouter for one domain; the routers are
aggregated in ``router.py``.
"""
