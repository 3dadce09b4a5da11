import io
import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from files_manager.core.errors import NotFoundError
from files_manager.logic.files import FileHierarchyStore, is_valid_node_id
from files_manager.routers.deps import get_current_user_id, get_files, get_optional_user_id

router = APIRouter()


class FileIn(BaseModel):
    name: str | None = None
    type: str | None = None
    parentId: int | str | None = None
    isPublic: bool | None = None
    data: str | None = None


def _node_id(raw: str) -> int:
    # ids that cannot exist are just missing nodes
    try:
        node_id = int(raw)
    except ValueError:
        raise NotFoundError() from None
    if not is_valid_node_id(node_id):
        raise NotFoundError()
    return node_id


def _page(raw: str | None) -> int:
    try:
        return max(int(raw), 0) if raw else 0
    except ValueError:
        return 0


# --- create a folder, file or image ---
@router.post("/files", status_code=201)
async def upload_file(
    body: FileIn | None = None,
    user_id: int = Depends(get_current_user_id),
    files: FileHierarchyStore = Depends(get_files),
):
    body = body or FileIn()
    node = await files.create_file(
        user_id,
        body.name,
        body.type,
        parent_id=body.parentId,
        is_public=bool(body.isPublic),
        data=body.data,
    )
    return node.to_dict()


# --- show one node ---
@router.get("/files/{file_id}")
async def show_file(
    file_id: str,
    user_id: int = Depends(get_current_user_id),
    files: FileHierarchyStore = Depends(get_files),
):
    node = await files.get(_node_id(file_id), user_id)
    return node.to_dict()


# --- list user's nodes under a parent, 20 per page ---
@router.get("/files")
async def list_files(
    parentId: str | None = None,
    page: str | None = None,
    user_id: int = Depends(get_current_user_id),
    files: FileHierarchyStore = Depends(get_files),
):
    nodes = await files.list(user_id, parent_id=parentId, page=_page(page))
    return [node.to_dict() for node in nodes]


@router.put("/files/{file_id}/publish")
async def publish_file(
    file_id: str,
    user_id: int = Depends(get_current_user_id),
    files: FileHierarchyStore = Depends(get_files),
):
    node = await files.set_visibility(_node_id(file_id), user_id, True)
    return node.to_dict()


@router.put("/files/{file_id}/unpublish")
async def unpublish_file(
    file_id: str,
    user_id: int = Depends(get_current_user_id),
    files: FileHierarchyStore = Depends(get_files),
):
    node = await files.set_visibility(_node_id(file_id), user_id, False)
    return node.to_dict()


# --- raw content of a file or image ---
@router.get("/files/{file_id}/data")
async def file_data(
    file_id: str,
    user_id: int | None = Depends(get_optional_user_id),
    files: FileHierarchyStore = Depends(get_files),
):
    node, content = await files.read(_node_id(file_id), user_id)
    content_type = mimetypes.guess_type(node.name)[0] or "application/octet-stream"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{node.name}"'},
    )
