from fastapi import APIRouter, Depends, Query, Body, status
from cipherdrive.api.deps import get_folder_service
from cipherdrive.consts import FolderAction, ROOT_ID
from cipherdrive.core.exceptions import InvalidOperationError, ValidationError
from cipherdrive.schemas import (
    ApiResponse, ApiError, ChildrenCount, FolderActionRequest,
    FolderCreateRequest, FolderResponse
)
from cipherdrive.services import FolderService
from cipherdrive.utils.verify_token import get_current_user_id
from cipherdrive.utils.api_response import created, ok
from typing import List, Optional, Union

router = APIRouter(
    tags=["Folders"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
        404: {"model": ApiError, "description": "Not Found"},
        422: {"model": ApiError, "description": "Validation Error"},
    }
)

@router.get("", response_model=ApiResponse[Union[List[FolderResponse], ChildrenCount]])
async def list_folders(
    trash: bool = Query(False, description="List folders in trash instead of live folders"),
    folder_id: Optional[str] = Query(None, alias="folderId", description="Folder to count children of"),
    count: bool = Query(False, description="Return children counts for folderId"),
    user_id: str = Depends(get_current_user_id),
    folder_service: FolderService = Depends(get_folder_service),
):
    """List live folders, list trash, or count the children of one folder"""
    if count and folder_id:
        counts = await folder_service.children_count(user_id, folder_id)
        return ok(data=counts, message="Folder children counted successfully")

    if trash:
        folders = await folder_service.list_trash(user_id)
    else:
        folders = await folder_service.list_live(user_id)
    return ok(data=[FolderResponse.from_document(f) for f in folders], message="Folders listed successfully")

@router.post("", response_model=ApiResponse[FolderResponse], status_code=status.HTTP_201_CREATED)
async def create_folder(
    request: FolderCreateRequest,
    user_id: str = Depends(get_current_user_id),
    folder_service: FolderService = Depends(get_folder_service),
):
    folder = await folder_service.create_folder(user_id, request.name, request.parent_id)
    return created(FolderResponse.from_document(folder), message="Folder created successfully")

@router.delete("", response_model=ApiResponse[bool])
async def delete_folder(
    folder_id: str = Query(..., alias="id", min_length=1, description="Folder id"),
    permanent: bool = Query(False, description="Delete permanently instead of moving to trash"),
    user_id: str = Depends(get_current_user_id),
    folder_service: FolderService = Depends(get_folder_service),
):
    if folder_id == ROOT_ID:
        raise InvalidOperationError("Cannot delete root folder.")

    if permanent:
        await folder_service.permanent_delete_folder(user_id, folder_id)
        return ok(message="Folder deleted permanently")

    await folder_service.soft_delete_folder(user_id, folder_id)
    return ok(message="Folder moved to trash")

@router.patch("", response_model=ApiResponse[bool])
async def update_folder(
    request: FolderActionRequest = Body(...),
    user_id: str = Depends(get_current_user_id),
    folder_service: FolderService = Depends(get_folder_service),
):
    """Restore a folder from trash or change its starred flag"""
    if request.action == FolderAction.RESTORE:
        await folder_service.restore_folder(user_id, request.folder_id)
        return ok(message="Folder restored successfully")

    if request.action != FolderAction.STAR:
        raise ValidationError("Invalid action.", field="action")
    if request.is_starred is None:
        raise ValidationError("isStarred boolean is required.", field="isStarred")
    await folder_service.set_starred(user_id, request.folder_id, request.is_starred)
    return ok(message="Folder updated successfully")
