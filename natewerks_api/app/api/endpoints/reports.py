"""
Admin reports.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from natewerks_api.app.api.deps import get_admin_service
from natewerks_api.app.schemas.user import UserRead
from natewerks_api.app.services.admin_service import AdminService


router = APIRouter()


@router.get("/reports/users", response_model=List[UserRead])
def user_report(
    admin_id: Optional[str] = Query(None, alias="adminId"),
    service: AdminService = Depends(get_admin_service),
) -> List[UserRead]:
    """Return every user record, including passwords and Stripe customer ids.

    Requires the ``adminId`` of a user with the ``admin`` role.
    """
    return service.list_users(admin_id)
