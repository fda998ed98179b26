"""
Pydantic models for announcements.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import RequestBody


class AnnouncementCreate(RequestBody):
    title: Optional[str] = Field(None, examples=["Maintenance window"])
    message: Optional[str] = Field(None, examples=["The service will be down on Sunday."])
    admin_id: Optional[str] = Field(None, alias="adminId", description="Id of the admin user creating the announcement")


class AnnouncementRead(BaseModel):
    id: str
    title: Optional[str] = None
    message: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)
