"""
Announcement endpoints.

Anyone may read announcements; creating one requires the ``adminId``
of a user with the ``admin`` role.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from natewerks_api.app.api.deps import get_admin_service
from natewerks_api.app.schemas.announcement import AnnouncementCreate, AnnouncementRead
from natewerks_api.app.schemas.common import MessageResponse
from natewerks_api.app.services.admin_service import AdminService


router = APIRouter()


@router.post("/announcements", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_announcement(
    body: Optional[AnnouncementCreate] = None,
    service: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    body = body or AnnouncementCreate()
    service.create_announcement(body.admin_id, body.title, body.message)
    return MessageResponse(message="Announcement created successfully")


@router.get("/announcements", response_model=List[AnnouncementRead])
def list_announcements(service: AdminService = Depends(get_admin_service)) -> List[AnnouncementRead]:
    """Return every announcement, newest first."""
    return service.list_announcements()
