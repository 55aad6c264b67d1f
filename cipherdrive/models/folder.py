from typing import Annotated
from beanie import Document, Indexed
from pydantic import Field
from cipherdrive.models.time_mixin import TimeMixin
from cipherdrive.models.soft_delete_mixin import SoftDeleteMixin

class Folder(Document, TimeMixin, SoftDeleteMixin):
    """Folder node in MongoDB; the root folder is implicit and never stored"""

    user_id: Annotated[str, Indexed(str)] = Field(..., description="User who owns the folder")
    name: str = Field(..., description="Display name, not unique among siblings")
    parent_id: Annotated[str, Indexed(str)] = Field(default="root", description="Parent folder id or 'root'")
    is_starred: bool = Field(default=False, description="Starred flag, only settable while live")

    class Settings:
        name = "folders"
