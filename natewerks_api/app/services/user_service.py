"""
Business logic for registration and login.

Email addresses are not unique: registering the same address twice
creates two users, and login then accepts whichever of them matches
the supplied password first in store order.
"""

import logging
from typing import Optional

from ..core.db import USER, DocumentStore
from ..core.errors import InvalidCredentials
from ..core.security import CredentialVerifier, PlaintextVerifier
from ..schemas.user import UserRead

logger = logging.getLogger(__name__)


class UserService:
    """Registers users and checks their credentials."""

    def __init__(self, store: DocumentStore, verifier: Optional[CredentialVerifier] = None) -> None:
        self.store = store
        self.verifier = verifier or PlaintextVerifier()

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> str:
        """Create an inactive, non‑admin user and return its id."""
        logger.info("Registering user %s", email)
        return self.store.insert(
            USER,
            {
                "name": name,
                "email": email,
                "password": self.verifier.prepare(password),
                "subscription_status": "inactive",
                "role": "user",
            },
        )

    def login(self, email: Optional[str], password: Optional[str]) -> UserRead:
        """Return the user whose email and password both match.

        Raises ``InvalidCredentials`` when no user matches.  The returned
        record includes the stored password.
        """
        for record in self.store.find_all(USER, email=email):
            if self.verifier.verify(password, record["password"]):
                logger.info("User %s logged in", record["id"])
                return UserRead(**record)
        logger.info("Rejected login for %s", email)
        raise InvalidCredentials()
