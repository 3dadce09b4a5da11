"""Opaque session tokens stored in an expiring key-value store."""

import logging
import secrets
from typing import Final

from files_manager.core.errors import AuthenticationError
from files_manager.storage.cache import ExpiringStore

logger = logging.getLogger(__name__)

# Token length in bytes (128 bits, 32 hex chars)
_TOKEN_BYTES: Final = 16

_DEFAULT_TTL_SECONDS: Final = 24 * 3600


def _key(token: str) -> str:
    return f"auth_{token}"


class SessionManager:
    """Issues, resolves and revokes session tokens.

    Expiry belongs to the store: every entry is written with an absolute
    TTL and nothing here sweeps stale sessions.
    """

    def __init__(self, store: ExpiringStore, ttl_seconds: int = _DEFAULT_TTL_SECONDS) -> None:
        self._store = store
        self.ttl_seconds = ttl_seconds

    async def issue(self, user_id: int) -> str:
        """Create a session for the user.

        Args:
            user_id: Authenticated user id.

        Returns:
            New random token.
        """
        token = secrets.token_hex(_TOKEN_BYTES)
        await self._store.set(_key(token), str(user_id), self.ttl_seconds)
        logger.info("Session issued for user %s: %s", user_id, token[:8])
        return token

    async def resolve(self, token: str | None) -> int:
        """Map a token to its user id.

        Raises:
            AuthenticationError: If the token is missing, unknown or expired.
        """
        if not token:
            raise AuthenticationError()
        value = await self._store.get(_key(token))
        if value is None:
            raise AuthenticationError()
        try:
            return int(value)
        except ValueError:
            logger.warning("Session %s holds a non-numeric user id", token[:8])
            raise AuthenticationError() from None

    async def revoke(self, token: str | None, expect_active: bool = True) -> None:
        """End a session.

        Args:
            token: Token to revoke.
            expect_active: When True, revoking a missing session is an
                authentication failure (logout path). When False it is a
                no-op.
        """
        if not token:
            if expect_active:
                raise AuthenticationError()
            return
        deleted = await self._store.delete(_key(token))
        if not deleted and expect_active:
            raise AuthenticationError()
        if deleted:
            logger.info("Session revoked: %s", token[:8])
