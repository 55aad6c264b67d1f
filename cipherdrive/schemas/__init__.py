from cipherdrive.schemas.response import ApiResponse, ApiError, ErrorDetail, HealthCheck
from cipherdrive.schemas.folder import (
    FolderCreate, FolderUpdate, FolderCreateRequest, FolderActionRequest,
    FolderResponse, ChildrenCount
)
from cipherdrive.schemas.file import FileCreate, FileUpload, FileResponse, StorageUsage
from cipherdrive.schemas.tree import RootNode, FolderNode, TreeNode, ROOT_NODE

__all__ = [
    "ApiResponse",
    "ApiError",
    "ErrorDetail",
    "HealthCheck",
    # Folder schemas
    "FolderCreate",
    "FolderUpdate",
    "FolderCreateRequest",
    "FolderActionRequest",
    "FolderResponse",
    "ChildrenCount",
    # File schemas
    "FileCreate",
    "FileUpload",
    "FileResponse",
    "StorageUsage",
    # Tree cache nodes
    "RootNode",
    "FolderNode",
    "TreeNode",
    "ROOT_NODE",
]
