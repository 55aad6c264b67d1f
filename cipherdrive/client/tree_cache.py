from typing import Callable, List, Optional

from cipherdrive.client import views
from cipherdrive.client.api_client import DriveApiClient, TokenProvider
from cipherdrive.client.views import Snapshot
from cipherdrive.consts import ROOT_ID
from cipherdrive.core.exceptions import (
    AppError,
    InvalidOperationError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from cipherdrive.schemas.tree import FolderNode, TreeNode
from cipherdrive.utils import get_logger, now_ms

logger = get_logger(__name__)


class FolderTreeCache:
    """Client-side mirror of one user's folder tree and trash.

    `folders` is replaced wholesale on every refresh and always holds the
    root entry. Mutations go to the server first; the local snapshot is only
    patched after the server accepted the change, then resynced.
    """

    def __init__(
        self,
        api: DriveApiClient,
        token_provider: Optional[TokenProvider] = None,
        auto_resync: bool = True,
        clock: Callable[[], int] = now_ms,
    ):
        self.api = api
        self.token_provider = token_provider or api.token_provider
        self.auto_resync = auto_resync
        self.clock = clock
        self.folders: Snapshot = views.empty_snapshot()
        self.trash: List[FolderNode] = []
        self.error: Optional[str] = None

    @property
    def signed_in(self) -> bool:
        return bool(self.token_provider())

    def _require_signed_in(self) -> None:
        if not self.signed_in:
            raise UnauthorizedError("Unauthorized")

    async def refresh(self) -> Snapshot:
        if not self.signed_in:
            self.folders = views.empty_snapshot()
            self.error = None
            return self.folders

        try:
            folders = await self.api.list_live()
        except AppError as e:
            self.error = e.message
            logger.warning(f"Folder refresh failed, keeping last snapshot: {e.message}")
            raise

        self.folders = views.build_snapshot(folders)
        self.error = None
        return self.folders

    async def refresh_trash(self) -> List[FolderNode]:
        if not self.signed_in:
            self.trash = []
            return self.trash

        try:
            trash = await self.api.list_trash()
        except AppError as e:
            self.error = e.message
            logger.warning(f"Trash refresh failed, keeping last list: {e.message}")
            raise

        self.trash = trash
        return self.trash

    async def _resync(self, trash_changed: bool) -> None:
        if not self.auto_resync:
            return
        # The mutation already succeeded remotely; a failed resync is kept in `error`
        try:
            await self.refresh()
            if trash_changed:
                await self.refresh_trash()
        except AppError as e:
            logger.warning(f"Resync after mutation failed: {e.message}")

    def _known(self, folder_id: str) -> TreeNode:
        node = views.find(self.folders, self.trash, folder_id)
        if node is None:
            raise NotFoundError("Folder not found.")
        return node

    async def create_folder(self, name: str, parent_id: str = ROOT_ID) -> FolderNode:
        self._require_signed_in()
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required.", field="name")
        parent = self.folders.get(parent_id)
        if parent is None or (isinstance(parent, FolderNode) and parent.is_trashed):
            raise NotFoundError("Parent folder not found.", field="parentId")

        folder = await self.api.create_folder(name, parent_id)
        self.folders = views.patch_created(self.folders, folder)
        await self._resync(trash_changed=False)
        return folder

    async def delete_folder(self, folder_id: str) -> None:
        """Move a folder to trash"""
        self._require_signed_in()
        if folder_id == ROOT_ID:
            raise InvalidOperationError("Cannot delete root folder.")
        node = self._known(folder_id)

        await self.api.delete_folder(folder_id)
        deleted_at = self.clock()
        self.folders = views.patch_soft_deleted(self.folders, folder_id, deleted_at)
        if isinstance(node, FolderNode):
            self.trash = [node.model_copy(update={"deleted_at": deleted_at}), *views.trash_without(self.trash, folder_id)]
        await self._resync(trash_changed=True)

    async def restore_folder(self, folder_id: str) -> None:
        self._require_signed_in()
        self._known(folder_id)

        await self.api.restore_folder(folder_id)
        self.folders = views.patch_restored(self.folders, folder_id, self.trash)
        self.trash = views.trash_without(self.trash, folder_id)
        await self._resync(trash_changed=True)

    async def permanent_delete_folder(self, folder_id: str) -> None:
        self._require_signed_in()
        if folder_id == ROOT_ID:
            raise InvalidOperationError("Cannot delete root folder.")
        self._known(folder_id)

        await self.api.delete_folder(folder_id, permanent=True)
        self.folders = views.patch_removed(self.folders, folder_id)
        self.trash = views.trash_without(self.trash, folder_id)
        await self._resync(trash_changed=True)

    async def set_starred(self, folder_id: str, is_starred: bool) -> None:
        self._require_signed_in()
        if folder_id == ROOT_ID:
            raise InvalidOperationError("Root folder cannot be starred.")
        self._known(folder_id)

        await self.api.set_starred(folder_id, is_starred)
        self.folders = views.patch_starred(self.folders, folder_id, is_starred)
        await self._resync(trash_changed=False)

    def children(self, parent_id: str = ROOT_ID) -> List[FolderNode]:
        return views.children(self.folders, parent_id)

    def starred(self) -> List[FolderNode]:
        return views.starred(self.folders)

    def breadcrumbs(self, folder_id: str) -> List[TreeNode]:
        return views.breadcrumbs(self.folders, folder_id)
