from cipherdrive.crud.folder import FolderCRUD
from cipherdrive.crud.file import FileCRUD

__all__ = ["FolderCRUD", "FileCRUD"]
