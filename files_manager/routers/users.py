from fastapi import APIRouter, Depends
from pydantic import BaseModel

from files_manager.logic.users import UserDirectory
from files_manager.models.user import User
from files_manager.routers.deps import get_current_user, get_users

router = APIRouter()


class UserIn(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post("/users", status_code=201)
async def create_user(body: UserIn | None = None, users: UserDirectory = Depends(get_users)):
    body = body or UserIn()
    user = await users.create(body.email, body.password)
    return user.to_dict()


@router.get("/users/me")
async def me(user: User = Depends(get_current_user)):
    return user.to_dict()
