from typing import Callable, List, Optional

from cipherdrive.configs.settings import settings
from cipherdrive.consts import ROOT_ID, DAY_MS
from cipherdrive.core.exceptions import (
    InvalidOperationError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from cipherdrive.crud.folder import FolderCRUD
from cipherdrive.crud.file import FileCRUD
from cipherdrive.models.folder import Folder
from cipherdrive.schemas import ChildrenCount, FolderCreate, FolderUpdate
from cipherdrive.utils import get_logger, now_ms
from starlette.status import HTTP_400_BAD_REQUEST

logger = get_logger(__name__)


class FolderService:
    """Folder tree and trash lifecycle.

    Live -> Trashed via soft delete, Trashed -> Live via restore and
    Trashed -> gone via permanent delete or the retention sweep. Soft delete
    marks only the target folder: its descendants stay live and simply become
    unreachable from root until they are moved or deleted themselves.

    Checks and writes are separate store calls, there is no transaction.
    """

    def __init__(
        self,
        crud: Optional[FolderCRUD] = None,
        file_crud: Optional[FileCRUD] = None,
        clock: Callable[[], int] = now_ms,
        retention_ms: Optional[int] = None,
    ):
        self.crud = crud or FolderCRUD()
        self.file_crud = file_crud or FileCRUD()
        self.clock = clock
        self.retention_ms = retention_ms if retention_ms is not None else settings.retention_window_ms

    async def _get_owned(self, user_id: str, folder_id: str) -> Folder:
        folder = await self.crud.get_owned(user_id, folder_id)
        if not folder:
            raise NotFoundError("Folder not found.")
        return folder

    async def get_live_folder(self, user_id: str, folder_id: str) -> Optional[Folder]:
        """Live folder owned by user_id, or None"""
        folder = await self.crud.get_owned(user_id, folder_id)
        if not folder or folder.is_trashed:
            return None
        return folder

    async def create_folder(self, user_id: str, name: str, parent_id: Optional[str] = None) -> Folder:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required.", field="name")

        parent_id = parent_id or ROOT_ID
        if parent_id != ROOT_ID:
            parent = await self.get_live_folder(user_id, parent_id)
            if not parent:
                raise NotFoundError(
                    "Parent folder not found.",
                    status_code=HTTP_400_BAD_REQUEST,
                    field="parentId",
                )

        folder = await self.crud.create(obj_in=FolderCreate(
            user_id=user_id,
            name=name,
            parent_id=parent_id,
            created_at=self.clock(),
        ))
        logger.info(f"Folder created: {folder.id} under {parent_id} for user {user_id}")
        return folder

    async def soft_delete_folder(self, user_id: str, folder_id: str) -> None:
        if folder_id == ROOT_ID:
            raise InvalidOperationError("Cannot delete root folder.")

        folder = await self._get_owned(user_id, folder_id)
        if folder.is_trashed:
            raise InvalidOperationError("Folder is already in trash.")

        await self.crud.soft_delete(folder, deleted_at=self.clock())
        logger.info(f"Folder moved to trash: {folder_id} (user {user_id})")

    async def restore_folder(self, user_id: str, folder_id: str) -> None:
        folder = await self._get_owned(user_id, folder_id)
        if not folder.is_trashed:
            raise InvalidOperationError("Folder is not in trash.")

        if folder.parent_id != ROOT_ID:
            parent = await self.get_live_folder(user_id, folder.parent_id)
            if not parent:
                raise PreconditionError("Parent folder no longer exists or is in trash.")

        await self.crud.update(folder, FolderUpdate(deleted_at=None))
        logger.info(f"Folder restored: {folder_id} (user {user_id})")

    async def permanent_delete_folder(self, user_id: str, folder_id: str) -> None:
        if folder_id == ROOT_ID:
            raise InvalidOperationError("Cannot delete root folder.")

        folder = await self._get_owned(user_id, folder_id)
        if not folder.is_trashed:
            raise InvalidOperationError("Folder must be moved to trash before it can be deleted permanently.")

        elapsed = self.clock() - folder.deleted_at
        if elapsed < self.retention_ms:
            remaining_days = -(-(self.retention_ms - elapsed) // DAY_MS)
            raise PreconditionError(
                f"Folder can be deleted permanently after the retention window; "
                f"{remaining_days} day(s) remaining.",
                details={"remaining_ms": self.retention_ms - elapsed},
            )

        await self.crud.delete(folder)
        logger.info(f"Folder permanently deleted: {folder_id} (user {user_id})")

    async def set_starred(self, user_id: str, folder_id: str, starred: bool) -> None:
        if folder_id == ROOT_ID:
            raise InvalidOperationError("Root folder cannot be starred.")

        folder = await self._get_owned(user_id, folder_id)
        if folder.is_trashed:
            raise InvalidOperationError("Cannot star a folder in trash.")

        if folder.is_starred != starred:
            await self.crud.update(folder, FolderUpdate(is_starred=starred))

    async def list_live(self, user_id: str) -> List[Folder]:
        return await self.crud.list_live(user_id)

    async def list_trash(self, user_id: str) -> List[Folder]:
        return await self.crud.list_trash(user_id)

    async def children_count(self, user_id: str, folder_id: str) -> ChildrenCount:
        """Live direct subfolders plus every file record in the folder"""
        if folder_id != ROOT_ID:
            await self._get_owned(user_id, folder_id)

        folders = await self.crud.count_live_children(user_id, folder_id)
        files = await self.file_crud.count_in_folder(user_id, folder_id)
        return ChildrenCount(folders=folders, files=files)

    async def purge_expired(self, now: Optional[int] = None) -> int:
        """Remove every trashed folder past the retention window, for all users"""
        cutoff = (now if now is not None else self.clock()) - self.retention_ms
        expired = await self.crud.list_expired(cutoff)

        purged = 0
        for folder in expired:
            try:
                await self.crud.delete(folder)
                purged += 1
            except Exception as e:
                logger.error(f"Failed to purge folder {folder.id}: {e}", exc_info=True)

        if purged:
            logger.info(f"Purged {purged} expired folder(s) from trash")
        return purged
