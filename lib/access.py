"""Caller identity, password checks, and the per-project admin roster."""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from lib.errors import AuthorizationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """The identity behind a request. ``username`` is ``None`` when anonymous."""

    username: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.username)


ANONYMOUS = Caller()


def hash_password(password: str) -> str:
    """Return the SHA-256 hex digest stored for ``password``."""

    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(username: str, password: str, password_hashes: Mapping[str, str]) -> bool:
    """Validate a plaintext password against the configured hash for ``username``."""

    stored_hash = password_hashes.get(username, "")
    if not stored_hash or not password:
        return False
    return hmac.compare_digest(hash_password(password), stored_hash)


class AdminRoster:
    """Maps project (or club) ids to the usernames allowed to administer them."""

    def __init__(self, admins: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._admins: Dict[str, frozenset] = {
            str(scope_id): frozenset(members) for scope_id, members in (admins or {}).items()
        }

    def is_admin(self, caller: Caller, scope_id: str) -> bool:
        if not caller.is_authenticated or not scope_id:
            return False
        return caller.username in self._admins.get(scope_id, frozenset())

    def require_admin(self, caller: Caller, scope_id: str) -> None:
        """Raise :class:`AuthorizationError` unless ``caller`` administers ``scope_id``."""

        if not self.is_admin(caller, scope_id):
            logger.warning(
                "Denied admin access to '%s' for %s",
                scope_id,
                caller.username or "anonymous caller",
            )
            raise AuthorizationError(f"You must be an admin of '{scope_id}' to do that.")

    def scopes_for(self, caller: Caller) -> list:
        """Return the ids ``caller`` administers, sorted."""

        if not caller.is_authenticated:
            return []
        return sorted(scope for scope, members in self._admins.items() if caller.username in members)


__all__ = ["ANONYMOUS", "AdminRoster", "Caller", "hash_password", "verify_password"]
