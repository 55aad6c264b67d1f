from enum import Enum

class FolderAction(str, Enum):
    RESTORE = "restore"
    STAR = "star"
