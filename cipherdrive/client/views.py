"""Pure views over a folder snapshot.

A snapshot maps folder id to TreeNode and always holds the root entry.
Nothing here mutates its input; every patch returns a new mapping.
"""
from typing import Dict, Iterable, List, Optional

from cipherdrive.consts import ROOT_ID
from cipherdrive.schemas.tree import FolderNode, RootNode, TreeNode, ROOT_NODE

Snapshot = Dict[str, TreeNode]


def empty_snapshot() -> Snapshot:
    return {ROOT_ID: ROOT_NODE}


def build_snapshot(folders: Iterable[FolderNode]) -> Snapshot:
    snapshot = empty_snapshot()
    for folder in folders:
        snapshot[folder.id] = folder
    return snapshot


def _is_live_folder(node: TreeNode) -> bool:
    return isinstance(node, FolderNode) and not node.is_trashed


def _by_name(node: TreeNode):
    return (node.name.casefold(), node.name)


def children(snapshot: Snapshot, parent_id: str) -> List[FolderNode]:
    """Live folders directly under parent_id, sorted by name"""
    return sorted(
        (node for node in snapshot.values() if _is_live_folder(node) and node.parent_id == parent_id),
        key=_by_name,
    )


def starred(snapshot: Snapshot) -> List[FolderNode]:
    """Live starred folders, root excluded, sorted by name"""
    return sorted(
        (node for node in snapshot.values() if _is_live_folder(node) and node.is_starred),
        key=_by_name,
    )


def breadcrumbs(snapshot: Snapshot, folder_id: str) -> List[TreeNode]:
    """Path root -> ... -> folder_id.

    If an ancestor is missing from the snapshot or trashed, the folder is not
    reachable from root and only [root] is returned. A repeated id stops the
    walk and returns root plus the part of the path collected so far.
    """
    root = snapshot.get(ROOT_ID, ROOT_NODE)
    path: List[FolderNode] = []
    seen = set()
    current: Optional[str] = folder_id

    while current and current != ROOT_ID:
        if current in seen:
            return [root, *reversed(path)]
        seen.add(current)

        node = snapshot.get(current)
        if not _is_live_folder(node):
            return [root]
        path.append(node)
        current = node.parent_id

    return [root, *reversed(path)]


def find(snapshot: Snapshot, trash: List[FolderNode], folder_id: str) -> Optional[TreeNode]:
    """Look a folder up in the live snapshot, then in trash"""
    node = snapshot.get(folder_id)
    if node is not None:
        return node
    return next((folder for folder in trash if folder.id == folder_id), None)


def patch_created(snapshot: Snapshot, folder: FolderNode) -> Snapshot:
    return {**snapshot, folder.id: folder}


def patch_soft_deleted(snapshot: Snapshot, folder_id: str, deleted_at: int) -> Snapshot:
    node = snapshot.get(folder_id)
    if not isinstance(node, FolderNode):
        return dict(snapshot)
    return {**snapshot, folder_id: node.model_copy(update={"deleted_at": deleted_at})}


def patch_restored(snapshot: Snapshot, folder_id: str, trash: Iterable[FolderNode] = ()) -> Snapshot:
    node = snapshot.get(folder_id)
    if node is None:
        node = next((folder for folder in trash if folder.id == folder_id), None)
    if not isinstance(node, FolderNode):
        return dict(snapshot)
    return {**snapshot, folder_id: node.model_copy(update={"deleted_at": None})}


def patch_removed(snapshot: Snapshot, folder_id: str) -> Snapshot:
    if folder_id == ROOT_ID:
        return dict(snapshot)
    return {key: node for key, node in snapshot.items() if key != folder_id}


def patch_starred(snapshot: Snapshot, folder_id: str, is_starred: bool) -> Snapshot:
    node = snapshot.get(folder_id)
    if not isinstance(node, FolderNode):
        return dict(snapshot)
    return {**snapshot, folder_id: node.model_copy(update={"is_starred": is_starred})}


def trash_without(trash: Iterable[FolderNode], folder_id: str) -> List[FolderNode]:
    return [folder for folder in trash if folder.id != folder_id]


__all__ = [
    "Snapshot",
    "RootNode",
    "FolderNode",
    "empty_snapshot",
    "build_snapshot",
    "children",
    "starred",
    "breadcrumbs",
    "find",
    "patch_created",
    "patch_soft_deleted",
    "patch_restored",
    "patch_removed",
    "patch_starred",
    "trash_without",
]
