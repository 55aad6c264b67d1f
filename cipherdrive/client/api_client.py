from typing import Any, Callable, Dict, List, Optional

import httpx

from cipherdrive.core.exceptions import ERROR_CLASSES, AppError, UnauthorizedError, UpstreamError
from cipherdrive.schemas.file import FileResponse, StorageUsage
from cipherdrive.schemas.folder import ChildrenCount
from cipherdrive.schemas.tree import FolderNode
from cipherdrive.utils import get_logger

logger = get_logger(__name__)

TokenProvider = Callable[[], Optional[str]]


class DriveApiClient:
    """Thin async wrapper around the /api/v1 surface.

    Error envelopes are turned back into the server's AppError subclasses,
    keyed by the code of the last reported error.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self._client = httpx.AsyncClient(base_url=f"{self.base_url}/api/v1", transport=transport)

    async def __aenter__(self) -> "DriveApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        token = self.token_provider()
        if not token:
            raise UnauthorizedError("Unauthorized")
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = self._headers()
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise UpstreamError(f"Request to drive API failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            return body.get("data")
        raise self._to_error(response.status_code, body)

    @staticmethod
    def _to_error(status_code: int, body: Dict[str, Any]) -> AppError:
        message = body.get("message") or f"HTTP {status_code}"
        errors = body.get("errors") or []
        detail = errors[-1] if errors else {}
        error_cls = ERROR_CLASSES.get(detail.get("code"), AppError)
        return error_cls(
            message,
            status_code=status_code,
            code=detail.get("code"),
            field=detail.get("field"),
            errors=errors or None,
        )

    async def list_live(self) -> List[FolderNode]:
        data = await self._request("GET", "/folders")
        return [FolderNode(**item) for item in data or []]

    async def list_trash(self) -> List[FolderNode]:
        data = await self._request("GET", "/folders", params={"trash": "true"})
        return [FolderNode(**item) for item in data or []]

    async def children_count(self, folder_id: str) -> ChildrenCount:
        data = await self._request("GET", "/folders", params={"folderId": folder_id, "count": "true"})
        return ChildrenCount(**data)

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> FolderNode:
        payload = {"name": name}
        if parent_id is not None:
            payload["parentId"] = parent_id
        data = await self._request("POST", "/folders", json=payload)
        return FolderNode(**data)

    async def delete_folder(self, folder_id: str, permanent: bool = False) -> None:
        params = {"id": folder_id}
        if permanent:
            params["permanent"] = "true"
        await self._request("DELETE", "/folders", params=params)

    async def restore_folder(self, folder_id: str) -> None:
        await self._request("PATCH", "/folders", json={"folderId": folder_id, "action": "restore"})

    async def set_starred(self, folder_id: str, is_starred: bool) -> None:
        await self._request(
            "PATCH", "/folders", json={"folderId": folder_id, "action": "star", "isStarred": is_starred}
        )

    async def list_files(self, folder_id: Optional[str] = None) -> List[FileResponse]:
        params = {"folderId": folder_id} if folder_id else None
        data = await self._request("GET", "/files", params=params)
        return [FileResponse(**item) for item in data or []]

    async def storage_usage(self) -> StorageUsage:
        data = await self._request("GET", "/files", params={"summary": "true"})
        return StorageUsage(**data)

    async def upload_file(
        self,
        data: bytes,
        file_name: str,
        folder_id: Optional[str] = None,
        content_type: str = "application/octet-stream",
        name_ciphertext: Optional[str] = None,
        iv: Optional[str] = None,
        key_envelope: Optional[str] = None,
    ) -> FileResponse:
        form = {
            "folderId": folder_id,
            "nameCiphertext": name_ciphertext,
            "iv": iv,
            "keyEnvelope": key_envelope,
        }
        result = await self._request(
            "POST",
            "/files",
            data={k: v for k, v in form.items() if v is not None},
            files={"file": (file_name, data, content_type)},
        )
        return FileResponse(**result)

    async def delete_file(self, file_id: str) -> None:
        await self._request("DELETE", "/files", params={"fileId": file_id})
