from cipherdrive.models.time_mixin import TimeMixin
from cipherdrive.models.soft_delete_mixin import SoftDeleteMixin
from cipherdrive.models.folder import Folder
from cipherdrive.models.file import File

# Export all models for easy import
__all__ = [
    "TimeMixin",
    "SoftDeleteMixin",
    "Folder",
    "File",
]

# List of all document models for Beanie initialization
DOCUMENT_MODELS = [
    Folder,
    File,
]
