from cipherdrive.consts.drive import ROOT_ID, ROOT_NAME, DEFAULT_CONTENT_TYPE, DEFAULT_UPLOAD_NAME, DAY_MS
from cipherdrive.consts.folder_action import FolderAction

__all__ = ["ROOT_ID", "ROOT_NAME", "DEFAULT_CONTENT_TYPE", "DEFAULT_UPLOAD_NAME", "DAY_MS", "FolderAction"]
