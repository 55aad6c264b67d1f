"""DriveApiClient file and count calls against the real app over ASGITransport."""

import hashlib

import httpx
import pytest

from cipherdrive.client import DriveApiClient
from cipherdrive.consts import ROOT_ID
from cipherdrive.core.exceptions import NotFoundError, PreconditionError, UnauthorizedError

from conftest import run


def api_for(app, token="user_1"):
    return DriveApiClient("http://drive.test", lambda: token, transport=httpx.ASGITransport(app=app))


def test_children_count(drive_app):
    async def scenario():
        async with api_for(drive_app) as api:
            docs = await api.create_folder("Docs")
            await api.create_folder("A", docs.id)
            await api.upload_file(b"abc", "a.txt", folder_id=docs.id)
            return await api.children_count(docs.id), await api.children_count(ROOT_ID)

    in_docs, in_root = run(scenario())
    assert (in_docs.folders, in_docs.files) == (1, 1)
    assert (in_root.folders, in_root.files) == (1, 0)


def test_upload_sends_encryption_metadata(drive_app, storage):
    async def scenario():
        async with api_for(drive_app) as api:
            docs = await api.create_folder("Docs")
            uploaded = await api.upload_file(
                b"ciphertext",
                "Notes.TXT",
                folder_id=docs.id,
                content_type="text/plain",
                name_ciphertext="enc-name",
                iv="iv-1",
                key_envelope="wrapped",
            )
            return docs, uploaded

    docs, uploaded = run(scenario())

    assert uploaded.folder_id == docs.id
    assert uploaded.name_ciphertext == "enc-name"
    assert uploaded.iv == "iv-1"
    assert uploaded.key_envelope == "wrapped"
    assert uploaded.content_type == "text/plain"
    assert uploaded.checksum == hashlib.sha256(b"ciphertext").hexdigest()
    assert uploaded.storage_key.endswith("-notes.txt")
    assert storage.objects[uploaded.storage_key] == (b"ciphertext", "text/plain")
    assert uploaded.url


def test_upload_into_trashed_folder(drive_app):
    async def scenario():
        async with api_for(drive_app) as api:
            docs = await api.create_folder("Docs")
            await api.delete_folder(docs.id)
            await api.upload_file(b"x", "x.bin", folder_id=docs.id)

    with pytest.raises(PreconditionError) as exc:
        run(scenario())
    assert exc.value.message == "Cannot upload into a trashed folder."


def test_list_files_and_usage(drive_app):
    async def scenario():
        async with api_for(drive_app) as api:
            docs = await api.create_folder("Docs")
            in_docs = await api.upload_file(b"12345", "a.bin", folder_id=docs.id)
            await api.upload_file(b"67", "b.bin")
            return (
                in_docs,
                await api.list_files(docs.id),
                await api.list_files(),
                await api.storage_usage(),
            )

    in_docs, docs_files, root_files, usage = run(scenario())

    assert [f.id for f in docs_files] == [in_docs.id]
    assert all(f.url for f in docs_files)
    assert [f.folder_id for f in root_files] == [ROOT_ID]
    assert (usage.total_bytes, usage.file_count) == (7, 2)


def test_delete_file(drive_app, storage):
    async def scenario():
        async with api_for(drive_app) as api:
            uploaded = await api.upload_file(b"abc", "a.bin")
            await api.delete_file(uploaded.id)
            return await api.list_files()

    assert run(scenario()) == []
    assert storage.objects == {}


def test_delete_unknown_file(drive_app):
    async def scenario():
        async with api_for(drive_app) as api:
            await api.delete_file("missing")

    with pytest.raises(NotFoundError) as exc:
        run(scenario())
    assert exc.value.status_code == 404


def test_missing_token_fails_before_request(drive_app):
    async def scenario():
        async with api_for(drive_app, token=None) as api:
            await api.storage_usage()

    with pytest.raises(UnauthorizedError):
        run(scenario())
