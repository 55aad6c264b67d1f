from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

from cipherdrive.consts import ROOT_ID, ROOT_NAME


class RootNode(BaseModel):
    """The implicit top of every user's tree; never persisted"""
    kind: Literal["root"] = "root"
    id: Literal["root"] = ROOT_ID
    name: str = ROOT_NAME
    parent_id: None = None
    created_at: int = 0
    deleted_at: None = None
    is_starred: Literal[False] = False


class FolderNode(BaseModel):
    """A persisted folder as seen by the client"""
    kind: Literal["folder"] = "folder"
    id: str
    name: str
    parent_id: str
    created_at: int
    user_id: Optional[str] = None
    updated_at: Optional[int] = None
    deleted_at: Optional[int] = None
    is_starred: bool = False

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None


TreeNode = Annotated[Union[RootNode, FolderNode], Field(discriminator="kind")]

ROOT_NODE = RootNode()
