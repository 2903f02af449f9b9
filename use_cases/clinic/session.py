"""
Clinic Session Reader.

Reads the auth token and role the login flow left in the process-wide
key-value store. The stored role string is parsed exactly once, here,
into the closed Role enum; nothing downstream compares role strings.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.session import KeyValueStore
from shared.api_config import ROLE_STORAGE_KEY, TOKEN_STORAGE_KEY

logger = logging.getLogger(__name__)


class Role(Enum):
    """Client-asserted role. Only decides which controls are offered."""
    ADMIN = "admin"
    ANONYMOUS_PATIENT = "patient"
    AUTHENTICATED_PATIENT = "loggedPatient"


class RoleParseError(ValueError):
    """The stored role string is not one this client understands."""


def parse_role(value: Optional[str]) -> Role:
    """
    Parse a stored role string.

    An absent role is a public visitor (ANONYMOUS_PATIENT). Any other
    unrecognized value fails loudly instead of silently offering no controls.
    """
    if value is None or not value.strip():
        return Role.ANONYMOUS_PATIENT
    try:
        return Role(value.strip())
    except ValueError:
        raise RoleParseError(f"Unrecognized role: {value!r}") from None


@dataclass(frozen=True)
class ClinicSession:
    """Token and role snapshot, trusted as-is."""
    token: Optional[str]
    role: Role

    @property
    def has_token(self) -> bool:
        return bool(self.token)


class SessionReader:
    """Read-only view over the persisted token and role."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def read_token(self) -> Optional[str]:
        token = self._store.get(TOKEN_STORAGE_KEY)
        return token if token else None

    def read_session(self) -> ClinicSession:
        """
        Read the current session.

        Raises:
            RoleParseError: if the stored role is unrecognized
        """
        session = ClinicSession(
            token=self.read_token(),
            role=parse_role(self._store.get(ROLE_STORAGE_KEY)),
        )
        logger.debug(f"Session role={session.role.name} token_present={session.has_token}")
        return session
