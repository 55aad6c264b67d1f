from cipherdrive.crud.base import BaseCRUD
from cipherdrive.models.file import File
from cipherdrive.schemas.file import FileCreate
from pydantic import BaseModel
from typing import List, Optional, Tuple


class FileCRUD(BaseCRUD[File, FileCreate, BaseModel]):
    def __init__(self):
        super().__init__(File)

    async def get_owned(self, user_id: str, file_id: str) -> Optional[File]:
        """Get file by id, or None if it is missing or owned by someone else"""
        file = await self.get_by_id(file_id)
        if not file or file.user_id != user_id:
            return None
        return file

    async def list_in_folder(self, user_id: str, folder_id: str) -> List[File]:
        """Files in a folder, newest first"""
        return await self.list({"user_id": user_id, "folder_id": folder_id}, sort="-created_at")

    async def count_in_folder(self, user_id: str, folder_id: str) -> int:
        return await self.count({"user_id": user_id, "folder_id": folder_id})

    async def get_usage(self, user_id: str) -> Tuple[int, int]:
        """Total size in bytes and number of files for user"""
        query = self.model.find({"user_id": user_id})
        total_size = await query.sum("size")
        file_count = await self.model.find({"user_id": user_id}).count()
        return int(total_size or 0), file_count
