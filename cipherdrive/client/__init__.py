from cipherdrive.client.api_client import DriveApiClient
from cipherdrive.client.tree_cache import FolderTreeCache
from cipherdrive.client import views

__all__ = [
    "DriveApiClient",
    "FolderTreeCache",
    "views",
]
