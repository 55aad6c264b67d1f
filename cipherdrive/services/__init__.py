from .object_storage import ObjectStorageService, get_object_storage
from .folder_service import FolderService
from .file_service import FileService
from .trash_sweeper import TrashSweeper, init_trash_sweeper, shutdown_trash_sweeper

__all__ = ["ObjectStorageService", "get_object_storage", "FolderService", "FileService", "TrashSweeper", "init_trash_sweeper", "shutdown_trash_sweeper"]
