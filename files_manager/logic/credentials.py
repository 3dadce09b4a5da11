"""Verification of Basic ``email:password`` credentials."""

import base64

from werkzeug.security import check_password_hash

from files_manager.core.errors import AuthenticationError
from files_manager.logic.users import UserDirectory
from files_manager.models.user import User


def decode_basic_auth(header: str | None) -> tuple[str, str]:
    """Split a ``Basic <base64(email:password)>`` header.

    Raises:
        AuthenticationError: If the header is absent, malformed or
            either part is empty.
    """
    if not header:
        raise AuthenticationError()

    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        raise AuthenticationError()

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except ValueError:
        raise AuthenticationError() from None

    # passwords may contain ':' themselves
    email, sep, password = decoded.partition(":")
    if not sep or not email or not password:
        raise AuthenticationError()
    return email, password


class CredentialVerifier:
    def __init__(self, users: UserDirectory) -> None:
        self._users = users

    async def verify(self, header: str | None) -> User:
        """Return the user matching the header's credentials.

        Unknown email and wrong password raise the same error so callers
        cannot probe which accounts exist.
        """
        email, password = decode_basic_auth(header)
        user = await self._users.find_by_email(email)
        if not user or not check_password_hash(user.password_hash, password):
            raise AuthenticationError()
        return user
