"""Shared fixtures for the CipherDrive test suite.

Nothing here talks to MongoDB or MinIO. Services get in-memory stand-ins for
their CRUD and object store collaborators through their constructors, and
the FastAPI app gets those services through dependency overrides. The bearer
token doubles as the owner id, so tests can act as several users at once.

TestClient is used without a `with` block so the lifespan (which connects to
MongoDB and starts the trash sweeper) never runs.
"""

import asyncio
import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("DRIVE_SWEEP_ENABLED", "false")

from typing import Optional

import pytest
from beanie import PydanticObjectId
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from pydantic import BaseModel

from cipherdrive.api.deps import get_file_service, get_folder_service
from cipherdrive.consts import DAY_MS
from cipherdrive.core.exceptions import UnauthorizedError, UpstreamError
from cipherdrive.main import app
from cipherdrive.models.file import File
from cipherdrive.models.folder import Folder
from cipherdrive.services import FileService, FolderService
from cipherdrive.utils.verify_token import get_current_user_id, security

T0 = 1_700_000_000_000
RETENTION_MS = 30 * DAY_MS


def run(coro):
    """Run a coroutine to completion in a fresh event loop"""
    return asyncio.run(coro)


class FakeClock:
    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def _apply(db_obj, obj_in) -> None:
    if isinstance(obj_in, BaseModel):
        data = obj_in.model_dump(exclude_unset=True)
    else:
        data = dict(obj_in)
    for key, value in data.items():
        setattr(db_obj, key, value)


class InMemoryFolderCRUD:
    """Same surface as FolderCRUD, backed by a dict"""

    def __init__(self):
        self.items = {}

    async def get_owned(self, user_id: str, folder_id: str) -> Optional[Folder]:
        folder = self.items.get(folder_id)
        if not folder or folder.user_id != user_id:
            return None
        return folder

    async def create(self, obj_in):
        folder = Folder.model_construct(id=PydanticObjectId(), updated_at=None, **obj_in.model_dump())
        self.items[str(folder.id)] = folder
        return folder

    async def update(self, db_obj, obj_in):
        _apply(db_obj, obj_in)
        return db_obj

    async def soft_delete(self, db_obj, deleted_at=None):
        db_obj.deleted_at = deleted_at
        return db_obj

    async def delete(self, db_obj) -> None:
        self.items.pop(str(db_obj.id), None)

    async def list_live(self, user_id: str):
        folders = [f for f in self.items.values() if f.user_id == user_id and not f.is_trashed]
        return sorted(folders, key=lambda f: f.created_at)

    async def list_trash(self, user_id: str):
        folders = [f for f in self.items.values() if f.user_id == user_id and f.is_trashed]
        return sorted(folders, key=lambda f: f.deleted_at, reverse=True)

    async def count_live_children(self, user_id: str, parent_id: str) -> int:
        return sum(
            1 for f in self.items.values()
            if f.user_id == user_id and f.parent_id == parent_id and not f.is_trashed
        )

    async def list_expired(self, cutoff: int):
        return [f for f in self.items.values() if f.is_trashed and f.deleted_at <= cutoff]


class InMemoryFileCRUD:
    """Same surface as FileCRUD, backed by a dict"""

    def __init__(self):
        self.items = {}
        self.fail_delete = False

    async def get_owned(self, user_id: str, file_id: str) -> Optional[File]:
        file = self.items.get(file_id)
        if not file or file.user_id != user_id:
            return None
        return file

    async def create(self, obj_in):
        file = File.model_construct(id=PydanticObjectId(), **obj_in.model_dump())
        self.items[str(file.id)] = file
        return file

    async def delete(self, db_obj) -> None:
        if self.fail_delete:
            raise RuntimeError("metadata store went away")
        self.items.pop(str(db_obj.id), None)

    async def list_in_folder(self, user_id: str, folder_id: str):
        files = [f for f in self.items.values() if f.user_id == user_id and f.folder_id == folder_id]
        return sorted(files, key=lambda f: f.created_at, reverse=True)

    async def count_in_folder(self, user_id: str, folder_id: str) -> int:
        return len(await self.list_in_folder(user_id, folder_id))

    async def get_usage(self, user_id: str):
        files = [f for f in self.items.values() if f.user_id == user_id]
        return sum(f.size for f in files), len(files)


class FakeObjectStorage:
    """Object store double keeping bytes in a dict"""

    def __init__(self):
        self.objects = {}
        self.fail = False

    async def ensure_bucket(self) -> None:
        return None

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        if self.fail:
            raise UpstreamError("Failed to store file contents")
        self.objects[key] = (data, content_type)

    async def delete(self, key: str) -> None:
        if self.fail:
            raise UpstreamError("Failed to delete file contents")
        self.objects.pop(key, None)

    async def signed_url(self, key: str, ttl_seconds: Optional[int] = None) -> str:
        return f"https://objects.test/{key}?ttl={ttl_seconds or 300}"


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def folder_crud():
    return InMemoryFolderCRUD()


@pytest.fixture()
def file_crud():
    return InMemoryFileCRUD()


@pytest.fixture()
def storage():
    return FakeObjectStorage()


@pytest.fixture()
def folder_service(folder_crud, file_crud, clock):
    return FolderService(crud=folder_crud, file_crud=file_crud, clock=clock, retention_ms=RETENTION_MS)


@pytest.fixture()
def file_service(storage, file_crud, folder_crud, clock):
    return FileService(storage=storage, crud=file_crud, folder_crud=folder_crud, clock=clock)


async def _token_as_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    if credentials is None:
        raise UnauthorizedError("Unauthorized")
    return credentials.credentials


@pytest.fixture()
def drive_app(folder_service, file_service):
    """The real app wired to in-memory services"""
    app.dependency_overrides[get_current_user_id] = _token_as_user_id
    app.dependency_overrides[get_folder_service] = lambda: folder_service
    app.dependency_overrides[get_file_service] = lambda: file_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(drive_app):
    """Client authenticated as user_1"""
    return TestClient(drive_app, headers={"Authorization": "Bearer user_1"})


@pytest.fixture()
def anon_client(drive_app):
    return TestClient(drive_app)


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {user_id}"}
