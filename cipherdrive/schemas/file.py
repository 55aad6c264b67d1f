from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class FileCreate(BaseModel):
    """Schema for creating a new file record (internal use with all fields)"""
    user_id: str = Field(..., description="User who owns the file")
    folder_id: str = Field(..., description="Containing folder id or 'root'")
    name_ciphertext: str = Field(..., description="Encrypted file name")
    content_type: str = Field(..., description="File MIME type")
    size: int = Field(..., ge=0, description="File size (bytes)")
    storage_key: str = Field(..., description="Object key in the object store")
    checksum: str = Field(..., description="sha256 hex digest")
    iv: str = Field("", description="Encryption IV")
    key_envelope: str = Field("", description="Wrapped content key")
    created_at: int = Field(..., description="Creation timestamp (epoch ms)")
    updated_at: int = Field(..., description="Last update timestamp (epoch ms)")


class FileUpload(BaseModel):
    """Raw upload handed from the HTTP layer to the file service"""
    data: bytes
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    name_ciphertext: Optional[str] = None
    iv: Optional[str] = None
    key_envelope: Optional[str] = None


class FileResponse(BaseModel):
    """Schema for returning file information"""
    id: str = Field(..., description="Unique file identifier")
    user_id: str = Field(..., description="User who owns the file")
    folder_id: str = Field(..., description="Containing folder id or 'root'")
    name_ciphertext: str = Field(..., description="Encrypted file name")
    content_type: str = Field(..., description="File MIME type")
    size: int = Field(..., description="File size in bytes")
    storage_key: str = Field(..., description="Object key in the object store")
    checksum: str = Field(..., description="sha256 hex digest")
    iv: str = Field("", description="Encryption IV")
    key_envelope: str = Field("", description="Wrapped content key")
    created_at: int = Field(..., description="Creation timestamp (epoch ms)")
    updated_at: Optional[int] = Field(None, description="Last update timestamp (epoch ms)")
    url: Optional[str] = Field(None, description="Time-limited download URL, minted per request")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "665f1f77bcf86cd799439011",
                "user_id": "user_2abc",
                "folder_id": "root",
                "name_ciphertext": "cmVwb3J0LnBkZg==",
                "content_type": "application/pdf",
                "size": 1024000,
                "storage_key": "users/user_2abc/root/1718000000000-9f8e7d6c5b4a3921-report.pdf",
                "checksum": "2c26b46b68ffc68ff99b453c1d30413413422d706483bfa0f98a5e886266e7ae",
                "iv": "",
                "key_envelope": "",
                "created_at": 1718000000000,
                "updated_at": 1718000000000,
                "url": "https://minio.example.com/cipherdrive/users/user_2abc/root/...?X-Amz-Signature=..."
            }
        }
    )

    @classmethod
    def from_document(cls, file, url: Optional[str] = None) -> "FileResponse":
        return cls(
            id=str(file.id),
            user_id=file.user_id,
            folder_id=file.folder_id,
            name_ciphertext=file.name_ciphertext,
            content_type=file.content_type,
            size=file.size,
            storage_key=file.storage_key,
            checksum=file.checksum,
            iv=file.iv,
            key_envelope=file.key_envelope,
            created_at=file.created_at,
            updated_at=file.updated_at,
            url=url,
        )


class StorageUsage(BaseModel):
    """Aggregate storage used by one owner"""
    total_bytes: int = Field(..., ge=0, description="Sum of file sizes in bytes")
    file_count: int = Field(..., ge=0, description="Number of file records")

    model_config = ConfigDict(
        json_schema_extra={"example": {"total_bytes": 1073741824, "file_count": 150}}
    )
