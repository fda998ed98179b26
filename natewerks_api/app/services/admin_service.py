"""
Business logic for admin‑only operations and announcements.

Admin checks go through a ``PrincipalResolver``; the default resolver
trusts the admin id supplied by the client.
"""

import logging
from typing import List, Optional

from ..core.db import ANNOUNCEMENT, USER, DocumentStore
from ..core.security import ADMIN_ROLE, PrincipalResolver, StorePrincipalResolver, require_role
from ..schemas.announcement import AnnouncementRead
from ..schemas.user import UserRead

logger = logging.getLogger(__name__)


class AdminService:
    """Announcements and user reports."""

    def __init__(self, store: DocumentStore, resolver: Optional[PrincipalResolver] = None) -> None:
        self.store = store
        self.resolver = resolver or StorePrincipalResolver(store)

    def _require_admin(self, admin_id: Optional[str]) -> None:
        require_role(self.resolver.resolve(admin_id), ADMIN_ROLE)

    def create_announcement(self, admin_id: Optional[str], title: Optional[str], message: Optional[str]) -> str:
        """Store a new announcement on behalf of an admin and return its id."""
        self._require_admin(admin_id)
        announcement_id = self.store.insert(ANNOUNCEMENT, {"title": title, "message": message})
        logger.info("Admin %s created announcement %s", admin_id, announcement_id)
        return announcement_id

    def list_announcements(self) -> List[AnnouncementRead]:
        """All announcements, newest first."""
        rows = self.store.find_all(ANNOUNCEMENT, sort=("created_at", "desc"))
        return [AnnouncementRead(**row) for row in rows]

    def list_users(self, admin_id: Optional[str]) -> List[UserRead]:
        """Every stored user, unredacted."""
        self._require_admin(admin_id)
        return [UserRead(**row) for row in self.store.find_all(USER)]
