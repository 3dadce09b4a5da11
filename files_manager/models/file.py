# files_manager/models/file.py
import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)

from files_manager.models.database import Base


class NodeKind(str, enum.Enum):
    folder = "folder"
    file = "file"
    image = "image"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileNode(Base):
    """One entry of the file hierarchy.

    The kind column is the discriminant: folders never carry a blob_ref,
    files and images always do. A NULL parent_id places the node at the root.
    """

    __tablename__ = "files"
    __table_args__ = (
        # listing is always by (owner, parent)
        Index("files_owner_parent_idx", "owner_id", "parent_id"),
        CheckConstraint(
            "(kind = 'folder') = (blob_ref IS NULL)",
            name="files_blob_ref_matches_kind",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    kind = Column(Enum(NodeKind, name="node_kind"), nullable=False)
    parent_id = Column(Integer, ForeignKey("files.id"), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    blob_ref = Column(String(64), nullable=True)   # key in the blob store
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    @property
    def is_folder(self) -> bool:
        return self.kind == NodeKind.folder

    def to_dict(self) -> dict:
        # 0 stands for the root on the wire; generated ids start at 1
        return {
            "id": self.id,
            "userId": self.owner_id,
            "name": self.name,
            "type": self.kind.value,
            "isPublic": self.is_public,
            "parentId": self.parent_id if self.parent_id is not None else 0,
        }
