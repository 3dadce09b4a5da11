"""File hierarchy store.

Nodes form a forest of folders, files and images. Folders hold only
metadata; files and images keep their bytes in the blob store and the
returned reference in ``blob_ref``. After creation only ``is_public``
ever changes, and nothing is deleted.
"""

import base64
import binascii
import logging
from typing import Final

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from files_manager.core.errors import (
    AuthorizationError,
    FilesManagerError,
    NotFoundError,
    ValidationError,
)
from files_manager.logic.access import can_mutate, can_read
from files_manager.models.database import Database
from files_manager.models.file import FileNode, NodeKind
from files_manager.storage.blobs import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE: Final = 20

_KINDS: Final = frozenset(kind.value for kind in NodeKind)

# ids are signed 64-bit integers in the database
MAX_NODE_ID: Final = 2**63 - 1


def is_valid_node_id(node_id: int) -> bool:
    return 0 < node_id <= MAX_NODE_ID


def normalize_parent_id(value: int | str | None) -> int | None:
    """Turn a wire parent id into a node id, or None for the root.

    ``None``, ``0`` and ``"0"`` all mean the root.

    Raises:
        ValueError: If the value is not an integer id.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid parent id: {value!r}")
    if value is None:
        return None
    parent_id = int(value)
    if parent_id == 0:
        return None
    if not is_valid_node_id(parent_id):
        raise ValueError(f"invalid parent id: {value!r}")
    return parent_id


def _decode_payload(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid data") from None


class FileHierarchyStore:
    def __init__(
        self,
        database: Database,
        blobs: BlobStore,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._db = database
        self._blobs = blobs
        self.page_size = page_size

    async def create_folder(
        self,
        owner_id: int,
        name: str | None,
        parent_id: int | str | None = None,
        is_public: bool = False,
    ) -> FileNode:
        return await self.create_file(
            owner_id,
            name,
            NodeKind.folder.value,
            parent_id=parent_id,
            is_public=is_public,
        )

    async def create_file(
        self,
        owner_id: int,
        name: str | None,
        kind: str | None,
        parent_id: int | str | None = None,
        is_public: bool = False,
        data: str | None = None,
    ) -> FileNode:
        """Create a folder, file or image node.

        Checks run in a fixed order and the first failure wins: name,
        kind, data, then parent.

        Args:
            owner_id: Id of the creating user; becomes the node's owner.
            name: Display name of the node.
            kind: One of ``folder``, ``file`` or ``image``.
            parent_id: Parent folder id; None, 0 or "0" for the root.
            is_public: Initial visibility.
            data: Base64 content, required unless kind is ``folder``.

        Returns:
            The persisted node.

        Raises:
            ValidationError: If any check fails.
        """
        if not name:
            raise ValidationError("Missing name")
        if not kind or kind not in _KINDS:
            raise ValidationError("Missing type")
        node_kind = NodeKind(kind)
        if node_kind != NodeKind.folder and not data:
            raise ValidationError("Missing data")

        try:
            parent = normalize_parent_id(parent_id)
        except (TypeError, ValueError):
            raise ValidationError("Parent not found") from None
        if parent is not None:
            await self._check_parent(parent, owner_id)

        node = FileNode(
            owner_id=owner_id,
            name=name,
            kind=node_kind,
            parent_id=parent,
            is_public=bool(is_public),
        )
        if node_kind != NodeKind.folder:
            node.blob_ref = await self._blobs.store(_decode_payload(data))

        try:
            async with self._db.session() as db:
                db.add(node)
                await db.commit()
        except (FilesManagerError, IntegrityError) as exc:
            if node.blob_ref:
                # no rollback of the written bytes
                logger.warning("Orphaned blob %s after failed insert", node.blob_ref)
            if isinstance(exc, IntegrityError):
                raise ValidationError("Invalid node") from exc
            raise

        logger.info("Created %s node %s for user %s", node_kind.value, node.id, owner_id)
        return node

    async def _check_parent(self, parent_id: int, owner_id: int) -> None:
        async with self._db.session() as db:
            parent = await db.get(FileNode, parent_id)
        # someone else's folder is reported as missing
        if parent is None or not can_mutate(parent, owner_id):
            raise ValidationError("Parent not found")
        if not parent.is_folder:
            raise ValidationError("Parent is not a folder")

    async def get(self, node_id: int, requester_id: int | None) -> FileNode:
        """Fetch a node the requester may read.

        Raises:
            NotFoundError: If the node does not exist or is neither owned by
                the requester nor public.
        """
        if not is_valid_node_id(node_id):
            raise NotFoundError()
        async with self._db.session() as db:
            node = await db.get(FileNode, node_id)
        if node is None or not can_read(node, requester_id):
            raise NotFoundError()
        return node

    async def list(
        self,
        requester_id: int,
        parent_id: int | str | None = None,
        page: int = 0,
    ) -> list[FileNode]:
        """One page of the requester's nodes under a parent, oldest first.

        An unknown, foreign or malformed parent simply yields an empty page.
        """
        try:
            parent = normalize_parent_id(parent_id)
        except (TypeError, ValueError):
            return []
        page = max(page, 0)
        offset = page * self.page_size
        # past the last addressable row
        if offset > MAX_NODE_ID:
            return []

        query = select(FileNode).where(FileNode.owner_id == requester_id)
        if parent is None:
            query = query.where(FileNode.parent_id.is_(None))
        else:
            query = query.where(FileNode.parent_id == parent)
        query = (
            query.order_by(FileNode.id)
            .offset(offset)
            .limit(self.page_size)
        )

        async with self._db.session() as db:
            return list(await db.scalars(query))

    async def set_visibility(self, node_id: int, requester_id: int, public: bool) -> FileNode:
        """Publish or unpublish a node.

        Raises:
            NotFoundError: If the node does not exist.
            AuthorizationError: If the requester does not own the node.
        """
        if not is_valid_node_id(node_id):
            raise NotFoundError()
        async with self._db.session() as db:
            node = await db.get(FileNode, node_id)
            if node is None:
                raise NotFoundError()
            if not can_mutate(node, requester_id):
                raise AuthorizationError()
            node.is_public = public
            await db.commit()
        return node

    async def read(self, node_id: int, requester_id: int | None) -> tuple[FileNode, bytes]:
        node = await self.get(node_id, requester_id)
        if node.is_folder:
            raise ValidationError("A folder doesn't have content")
        return node, await self._blobs.retrieve(node.blob_ref)

    async def count(self) -> int:
        async with self._db.session() as db:
            return await db.scalar(select(func.count()).select_from(FileNode))
