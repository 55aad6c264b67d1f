from typing import Annotated
from beanie import Document, Indexed
from pydantic import Field
from cipherdrive.models.time_mixin import TimeMixin


class File(Document, TimeMixin):
    """Encrypted file metadata in MongoDB; bytes live in the object store"""

    user_id: Annotated[str, Indexed(str)] = Field(..., description="User who owns the file")
    folder_id: Annotated[str, Indexed(str)] = Field(default="root", description="Containing folder id or 'root'")
    name_ciphertext: str = Field(..., description="Encrypted file name, opaque to the server")
    content_type: str = Field(..., description="MIME type reported by the client")
    size: int = Field(..., ge=0, description="Size in bytes")
    storage_key: str = Field(..., description="Object key in the object store")
    checksum: str = Field(..., description="sha256 hex digest of the stored bytes")
    iv: str = Field(default="", description="Client encryption IV, passed through verbatim")
    key_envelope: str = Field(default="", description="Wrapped content key, passed through verbatim")

    class Settings:
        name = "files"
