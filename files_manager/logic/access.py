"""Ownership and visibility rules for file nodes."""

from files_manager.models.file import FileNode


def can_read(node: FileNode, requester_id: int | None) -> bool:
    """Owners read their nodes; anyone reads a public node."""
    return node.owner_id == requester_id or bool(node.is_public)


def can_mutate(node: FileNode, requester_id: int | None) -> bool:
    # visibility never grants write access
    return requester_id is not None and node.owner_id == requester_id
