from cipherdrive.services import FolderService, FileService


def get_folder_service() -> FolderService:
    return FolderService()


def get_file_service() -> FileService:
    return FileService()
