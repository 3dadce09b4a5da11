from fastapi import APIRouter, Depends, Header, Response

from files_manager.logic.credentials import CredentialVerifier
from files_manager.logic.sessions import SessionManager
from files_manager.logic.users import UserDirectory
from files_manager.routers.deps import get_credentials, get_sessions, get_users

router = APIRouter()


@router.get("/connect")
async def connect(
    authorization: str | None = Header(default=None),
    credentials: CredentialVerifier = Depends(get_credentials),
    sessions: SessionManager = Depends(get_sessions),
):
    user = await credentials.verify(authorization)

    # login success → hand out a session token
    token = await sessions.issue(user.id)
    return {"token": token}


@router.get("/disconnect", status_code=204)
async def disconnect(
    x_token: str | None = Header(default=None),
    sessions: SessionManager = Depends(get_sessions),
    users: UserDirectory = Depends(get_users),
):
    user_id = await sessions.resolve(x_token)
    await users.get(user_id)
    await sessions.revoke(x_token)
    return Response(status_code=204)
