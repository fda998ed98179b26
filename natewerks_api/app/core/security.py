"""
Credential verification and principal resolution.

Two concerns live here:

* ``CredentialVerifier`` decides how passwords are stored and checked.
  ``PlaintextVerifier`` keeps the historical behaviour (passwords stored
  verbatim, compared by equality); ``PBKDF2Verifier`` stores salted
  PBKDF2‑HMAC‑SHA256 hashes.  ``build_verifier`` picks one from the
  ``PASSWORD_SCHEME`` setting.
* ``PrincipalResolver`` turns the identifier a caller presents into a
  ``Principal`` carrying a role claim.  ``StorePrincipalResolver``
  trusts the client‑supplied user id and reads the role from the user
  record; a session‑ or token‑based resolver can replace it without
  touching the services.
"""

import hashlib
import hmac
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .db import USER, DocumentStore
from .errors import Unauthorized

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class CredentialVerifier:
    """Interface for password storage and verification."""

    def prepare(self, password: Optional[str]) -> Optional[str]:
        """Return the value to persist for a newly registered password."""
        raise NotImplementedError

    def verify(self, password: Optional[str], stored: Optional[str]) -> bool:
        """Return True if ``password`` matches the persisted value."""
        raise NotImplementedError


class PlaintextVerifier(CredentialVerifier):
    """Stores passwords verbatim and compares them by equality."""

    def prepare(self, password: Optional[str]) -> Optional[str]:
        return password

    def verify(self, password: Optional[str], stored: Optional[str]) -> bool:
        return password == stored


class PBKDF2Verifier(CredentialVerifier):
    """Salted PBKDF2‑HMAC‑SHA256 hashes stored as ``salthex$hashhex``."""

    def __init__(self, iterations: int = 100_000) -> None:
        self.iterations = iterations

    def _derive(self, password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, self.iterations)

    def prepare(self, password: Optional[str]) -> Optional[str]:
        if password is None:
            return None
        salt = os.urandom(16)
        return f"{salt.hex()}${self._derive(password, salt).hex()}"

    def verify(self, password: Optional[str], stored: Optional[str]) -> bool:
        if password is None or not stored or "$" not in stored:
            return False
        salt_hex, hash_hex = stored.split("$", 1)
        try:
            salt = bytes.fromhex(salt_hex)
            expected = bytes.fromhex(hash_hex)
        except ValueError:
            return False
        return hmac.compare_digest(self._derive(password, salt), expected)


def build_verifier(scheme: str) -> CredentialVerifier:
    """Return the verifier for a ``PASSWORD_SCHEME`` value."""
    schemes = {
        "plain": PlaintextVerifier,
        "pbkdf2": PBKDF2Verifier,
    }
    try:
        return schemes[scheme.strip().lower()]()
    except KeyError:
        raise ValueError(f"Unsupported password scheme: {scheme}") from None


@dataclass(frozen=True)
class Principal:
    """The caller an operation is authorized against."""

    user_id: str
    role: str


class PrincipalResolver:
    def resolve(self, principal_id: Optional[str]) -> Optional[Principal]:
        raise NotImplementedError


class StorePrincipalResolver(PrincipalResolver):
    """Trusts the id supplied by the client and looks up its role."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def resolve(self, principal_id: Optional[str]) -> Optional[Principal]:
        user = self.store.find_by_id(USER, principal_id)
        if user is None:
            return None
        return Principal(user_id=user["id"], role=user["role"])


def require_role(principal: Optional[Principal], role: str) -> Principal:
    """Return ``principal`` if it holds ``role``; raise ``Unauthorized`` otherwise."""
    if principal is None or principal.role != role:
        logger.warning(
            "Denied %s access to principal %s",
            role,
            principal.user_id if principal else None,
        )
        raise Unauthorized()
    return principal
