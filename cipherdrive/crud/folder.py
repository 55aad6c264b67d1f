from cipherdrive.crud.base import BaseCRUD
from cipherdrive.models.folder import Folder
from cipherdrive.schemas import FolderCreate, FolderUpdate
from typing import List, Optional

class FolderCRUD(BaseCRUD[Folder, FolderCreate, FolderUpdate]):
    def __init__(self):
        super().__init__(Folder)

    async def get_owned(self, user_id: str, folder_id: str) -> Optional[Folder]:
        """Get a folder by id, or None if it is missing or owned by someone else"""
        folder = await self.get_by_id(folder_id)
        if not folder or folder.user_id != user_id:
            return None
        return folder

    async def list_live(self, user_id: str) -> List[Folder]:
        """All live folders of a user, oldest first"""
        return await self.list({"user_id": user_id}, include_deleted=False, sort="+created_at")

    async def list_trash(self, user_id: str) -> List[Folder]:
        """All trashed folders of a user, most recently trashed first"""
        return await self.list(
            {"user_id": user_id, "deleted_at": {"$ne": None}},
            sort="-deleted_at",
        )

    async def count_live_children(self, user_id: str, parent_id: str) -> int:
        """Count direct live subfolders"""
        return await self.count({"user_id": user_id, "parent_id": parent_id}, include_deleted=False)

    async def list_expired(self, cutoff: int) -> List[Folder]:
        """Trashed folders of every user with deleted_at at or before cutoff"""
        return await self.list({"deleted_at": {"$ne": None, "$lte": cutoff}})
