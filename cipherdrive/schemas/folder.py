from pydantic import BaseModel, ConfigDict, Field
from typing import Optional



class FolderCreate(BaseModel):
    """Internal schema for creating folder with all required fields"""
    user_id: str
    name: str
    parent_id: str = "root"
    created_at: int
    is_starred: bool = False
    deleted_at: Optional[int] = None


class FolderUpdate(BaseModel):
    """Schema for updating folder state"""
    is_starred: Optional[bool] = None
    deleted_at: Optional[int] = None


class FolderCreateRequest(BaseModel):
    """Body of POST /folders"""
    name: str = Field("", description="Folder name; trimmed before use")
    parent_id: Optional[str] = Field(None, alias="parentId", description="Parent folder id, defaults to root")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"name": "Docs", "parentId": "root"}},
    )


class FolderActionRequest(BaseModel):
    """Body of PATCH /folders"""
    folder_id: str = Field(..., alias="folderId", min_length=1)
    action: str = Field(..., description="One of: restore, star")
    is_starred: Optional[bool] = Field(None, alias="isStarred")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"folderId": "665f1f77bcf86cd799439011", "action": "star", "isStarred": True}},
    )


class FolderResponse(BaseModel):
    """Schema for returning folder information"""
    id: str
    user_id: str
    name: str
    parent_id: str
    created_at: int
    updated_at: Optional[int] = None
    deleted_at: Optional[int] = None
    is_starred: bool = False

    @classmethod
    def from_document(cls, folder) -> "FolderResponse":
        return cls(
            id=str(folder.id),
            user_id=folder.user_id,
            name=folder.name,
            parent_id=folder.parent_id,
            created_at=folder.created_at,
            updated_at=folder.updated_at,
            deleted_at=folder.deleted_at,
            is_starred=folder.is_starred,
        )


class ChildrenCount(BaseModel):
    """Live direct subfolders and files of a folder"""
    folders: int = Field(..., ge=0)
    files: int = Field(..., ge=0)
