from fastapi import APIRouter, Depends, Query, UploadFile, status
from fastapi import File as FormFile, Form
from cipherdrive.api.deps import get_file_service
from cipherdrive.configs.settings import settings
from cipherdrive.core.exceptions import ValidationError
from cipherdrive.schemas import ApiResponse, ApiError, FileResponse, FileUpload, StorageUsage
from cipherdrive.services import FileService
from cipherdrive.utils.verify_token import get_current_user_id
from cipherdrive.utils.api_response import created, ok
from cipherdrive.utils import get_logger
from typing import List, Optional, Union

logger = get_logger(__name__)

router = APIRouter(
    tags=["Files"],
    responses={
        400: {"model": ApiError, "description": "Bad Request"},
        401: {"model": ApiError, "description": "Unauthorized"},
        404: {"model": ApiError, "description": "Not Found"},
        422: {"model": ApiError, "description": "Validation Error"},
        502: {"model": ApiError, "description": "Storage Failure"},
    }
)

def _too_large() -> ValidationError:
    return ValidationError(
        "File is too large.",
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        field="file",
    )

@router.get(
    "",
    response_model=ApiResponse[Union[List[FileResponse], StorageUsage]],
    summary="List Files",
    description="List files in a folder with fresh download URLs, or the caller's storage usage when summary=true",
)
async def list_files(
    folder_id: Optional[str] = Query(None, alias="folderId", description="Folder id, defaults to root"),
    summary: bool = Query(False, description="Return aggregate usage instead of a listing"),
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
):
    if summary:
        usage = await file_service.total_usage(user_id)
        return ok(data=usage, message="Storage usage retrieved successfully")

    files = await file_service.list_files_in_folder(user_id, folder_id)
    return ok(
        data=[FileResponse.from_document(file, url=url) for file, url in files],
        message="Files listed successfully",
    )

@router.post(
    "",
    response_model=ApiResponse[FileResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload File",
    description="Upload encrypted file bytes and store their metadata",
    responses={
        201: {"description": "File uploaded successfully"},
        400: {"description": "Empty file or trashed target folder"},
        404: {"description": "Target folder not found"},
    }
)
async def upload_file(
    file: UploadFile = FormFile(..., description="Encrypted file contents"),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    name_ciphertext: Optional[str] = Form(None, alias="nameCiphertext"),
    iv: Optional[str] = Form(None),
    key_envelope: Optional[str] = Form(None, alias="keyEnvelope"),
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
):
    limit = settings.DRIVE_MAX_UPLOAD_BYTES
    if file.size is not None and file.size > limit:
        raise _too_large()

    data = await file.read(limit + 1)
    if len(data) > limit:
        raise _too_large()

    upload = FileUpload(
        data=data,
        file_name=file.filename,
        content_type=file.content_type,
        name_ciphertext=name_ciphertext,
        iv=iv,
        key_envelope=key_envelope,
    )
    file_created, url = await file_service.create_file_record(user_id, folder_id, upload)
    return created(FileResponse.from_document(file_created, url=url), message="File uploaded successfully")

@router.delete(
    "",
    response_model=ApiResponse[bool],
    summary="Delete File",
    description="Delete a file from storage and database",
    responses={
        200: {"description": "File deleted successfully"},
        404: {"description": "File not found"},
    }
)
async def delete_file(
    file_id: str = Query(..., alias="fileId", min_length=1),
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
):
    await file_service.delete_file_record(user_id, file_id)
    return ok(message="File deleted successfully")
