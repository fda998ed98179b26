"""
Top‑level router.

Aggregates the domain routers.  Paths are served from the application
root (``/register``, ``/subscribe`` ...) to keep the public URLs stable
for existing clients, so the sub‑routers carry their full paths and no
prefix is applied here.
"""

from fastapi import APIRouter

from .endpoints import announcements, billing, reports, users

router = APIRouter()

router.include_router(users.router, tags=["users"])
router.include_router(billing.router, tags=["billing"])
router.include_router(announcements.router, tags=["announcements"])
router.include_router(reports.router, tags=["reports"])
