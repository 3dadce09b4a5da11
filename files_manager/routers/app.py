from fastapi import APIRouter, Depends, Request

from files_manager.logic.files import FileHierarchyStore
from files_manager.logic.users import UserDirectory
from files_manager.routers.deps import get_files, get_users

router = APIRouter()


@router.get("/status")
async def status(request: Request):
    return {
        "redis": await request.app.state.cache.is_alive(),
        "db": await request.app.state.database.is_alive(),
    }


@router.get("/stats")
async def stats(
    users: UserDirectory = Depends(get_users),
    files: FileHierarchyStore = Depends(get_files),
):
    return {"users": await users.count(), "files": await files.count()}
