from fastapi import Depends, Header, Request

from files_manager.core.errors import AuthenticationError
from files_manager.logic.credentials import CredentialVerifier
from files_manager.logic.files import FileHierarchyStore
from files_manager.logic.sessions import SessionManager
from files_manager.logic.users import UserDirectory
from files_manager.models.user import User


# --- store handles built in the app lifespan ---
def get_users(request: Request) -> UserDirectory:
    return request.app.state.users


def get_credentials(request: Request) -> CredentialVerifier:
    return request.app.state.credentials


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_files(request: Request) -> FileHierarchyStore:
    return request.app.state.files


# --- helper: current user from the X-Token header ---
async def get_current_user_id(
    x_token: str | None = Header(default=None),
    sessions: SessionManager = Depends(get_sessions),
) -> int:
    return await sessions.resolve(x_token)


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    users: UserDirectory = Depends(get_users),
) -> User:
    return await users.get(user_id)


async def get_optional_user_id(
    x_token: str | None = Header(default=None),
    sessions: SessionManager = Depends(get_sessions),
) -> int | None:
    # anonymous callers may still read public nodes
    try:
        return await sessions.resolve(x_token)
    except AuthenticationError:
        return None
