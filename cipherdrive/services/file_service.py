import base64
import hashlib
from typing import Callable, List, Optional, Tuple

from cipherdrive.consts import ROOT_ID, DEFAULT_CONTENT_TYPE, DEFAULT_UPLOAD_NAME
from cipherdrive.core.exceptions import (
    NotFoundError,
    PreconditionError,
    UpstreamError,
    ValidationError,
)
from cipherdrive.crud.file import FileCRUD
from cipherdrive.crud.folder import FolderCRUD
from cipherdrive.models.file import File
from cipherdrive.schemas import FileCreate, FileUpload, StorageUsage
from cipherdrive.services.object_storage import ObjectStorageService, get_object_storage
from cipherdrive.utils import get_logger, log_with_context, now_ms, random_suffix, sanitize_file_name

logger = get_logger(__name__)


class FileService:
    def __init__(
        self,
        storage: Optional[ObjectStorageService] = None,
        crud: Optional[FileCRUD] = None,
        folder_crud: Optional[FolderCRUD] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage or get_object_storage()
        self.crud = crud or FileCRUD()
        self.folder_crud = folder_crud or FolderCRUD()
        self.clock = clock

    async def _check_folder(self, user_id: str, folder_id: str, trashed_message: str) -> None:
        """Target folder must be root or a live folder owned by user_id"""
        if folder_id == ROOT_ID:
            return
        folder = await self.folder_crud.get_owned(user_id, folder_id)
        if not folder:
            raise NotFoundError("Folder not found.")
        if folder.is_trashed:
            raise PreconditionError(trashed_message)

    def _build_storage_key(self, user_id: str, folder_id: str, file_name: str) -> str:
        safe_name = sanitize_file_name(file_name.lower())
        return f"users/{user_id}/{folder_id}/{self.clock()}-{random_suffix()}-{safe_name}"

    async def create_file_record(self, user_id: str, folder_id: Optional[str], upload: FileUpload) -> Tuple[File, str]:
        """Store encrypted bytes and their metadata row

        Args:
            user_id: Owner of the new file
            folder_id: Target folder id, empty means root
            upload: Raw bytes plus client-supplied encryption metadata

        Returns:
            The stored record and a freshly signed download URL
        """
        folder_id = folder_id or ROOT_ID
        await self._check_folder(user_id, folder_id, "Cannot upload into a trashed folder.")

        if not upload.data:
            raise ValidationError("File cannot be empty.", field="file")

        content_type = upload.content_type or DEFAULT_CONTENT_TYPE
        original_name = upload.file_name or DEFAULT_UPLOAD_NAME
        storage_key = self._build_storage_key(user_id, folder_id, original_name)
        checksum = hashlib.sha256(upload.data).hexdigest()

        await self.storage.put(storage_key, upload.data, content_type)
        logger.info(f"[FILE_UPLOAD] Stored {len(upload.data)} bytes at {storage_key}")

        now = self.clock()
        file = await self.crud.create(obj_in=FileCreate(
            user_id=user_id,
            folder_id=folder_id,
            name_ciphertext=upload.name_ciphertext or base64.b64encode(original_name.encode("utf-8")).decode("ascii"),
            content_type=content_type,
            size=len(upload.data),
            storage_key=storage_key,
            checksum=checksum,
            iv=upload.iv or "",
            key_envelope=upload.key_envelope or "",
            created_at=now,
            updated_at=now,
        ))
        logger.info(f"[FILE_UPLOAD] File record created - file_id: {file.id}, folder: {folder_id}")

        url = await self.storage.signed_url(storage_key)
        return file, url

    async def list_files_in_folder(self, user_id: str, folder_id: Optional[str]) -> List[Tuple[File, str]]:
        """Files in a folder, newest first, each with a new signed URL"""
        folder_id = folder_id or ROOT_ID
        await self._check_folder(user_id, folder_id, "Folder is in trash.")

        files = await self.crud.list_in_folder(user_id, folder_id)
        return [(file, await self.storage.signed_url(file.storage_key)) for file in files]

    async def delete_file_record(self, user_id: str, file_id: str) -> None:
        """Delete file bytes, then the metadata row

        The two deletes are not atomic. A failure in between leaves an orphaned
        object or a dangling record; it is logged and reported, not repaired.
        """
        logger.info(f"[FILE_DELETE] Starting deletion - user_id: {user_id}, file_id: {file_id}")

        file = await self.crud.get_owned(user_id, file_id)
        if not file:
            logger.warning(f"[FILE_DELETE] File not found - file_id: {file_id}, user_id: {user_id}")
            raise NotFoundError("File not found.")

        await self.storage.delete(file.storage_key)

        try:
            await self.crud.delete(file)
        except Exception as e:
            log_with_context(
                logger, "error",
                "[FILE_DELETE] Object deleted but metadata row remains",
                exc_info=True,
                file_id=file_id,
                storage_key=file.storage_key,
            )
            raise UpstreamError(f"Failed to delete file record from database: {e}")

        logger.info(f"[FILE_DELETE] Successfully completed - file_id: {file_id}")

    async def total_usage(self, user_id: str) -> StorageUsage:
        total_bytes, file_count = await self.crud.get_usage(user_id)
        return StorageUsage(total_bytes=total_bytes, file_count=file_count)
