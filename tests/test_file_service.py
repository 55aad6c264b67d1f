"""File records: upload, listing, delete and usage."""

import base64
import hashlib
import re

import pytest

from cipherdrive.consts import ROOT_ID
from cipherdrive.core.exceptions import NotFoundError, PreconditionError, UpstreamError, ValidationError
from cipherdrive.schemas import FileUpload

from conftest import T0, run


def _upload(data=b"ciphertext", **kwargs):
    return FileUpload(data=data, **kwargs)


class TestCreateFileRecord:
    def test_upload_to_root(self, file_service, storage):
        file, url = run(file_service.create_file_record("user_1", None, _upload(
            file_name="Report 2024.PDF",
            content_type="application/pdf",
            name_ciphertext="enc-name",
            iv="iv-1",
            key_envelope="wrapped",
        )))

        assert file.folder_id == ROOT_ID
        assert file.size == len(b"ciphertext")
        assert file.checksum == hashlib.sha256(b"ciphertext").hexdigest()
        assert file.content_type == "application/pdf"
        assert file.name_ciphertext == "enc-name"
        assert file.iv == "iv-1"
        assert file.key_envelope == "wrapped"
        assert file.created_at == T0
        assert re.fullmatch(
            rf"users/user_1/root/{T0}-[0-9a-f]{{16}}-report_2024\.pdf", file.storage_key
        )
        assert storage.objects[file.storage_key] == (b"ciphertext", "application/pdf")
        assert url.startswith(f"https://objects.test/{file.storage_key}")

    def test_defaults_for_missing_metadata(self, file_service):
        file, _ = run(file_service.create_file_record("user_1", ROOT_ID, _upload()))

        assert file.content_type == "application/octet-stream"
        assert file.name_ciphertext == base64.b64encode(b"upload.bin").decode("ascii")
        assert file.iv == ""
        assert file.key_envelope == ""
        assert file.storage_key.endswith("-upload.bin")

    def test_storage_keys_are_unique(self, file_service):
        first, _ = run(file_service.create_file_record("user_1", None, _upload(file_name="a.txt")))
        second, _ = run(file_service.create_file_record("user_1", None, _upload(file_name="a.txt")))
        assert first.storage_key != second.storage_key

    def test_upload_into_live_folder(self, file_service, folder_service):
        docs = run(folder_service.create_folder("user_1", "Docs"))
        file, _ = run(file_service.create_file_record("user_1", str(docs.id), _upload()))
        assert file.folder_id == str(docs.id)
        assert file.storage_key.startswith(f"users/user_1/{docs.id}/")

    def test_upload_into_trashed_folder(self, file_service, folder_service, storage, file_crud):
        docs = run(folder_service.create_folder("user_1", "Docs"))
        run(folder_service.soft_delete_folder("user_1", str(docs.id)))

        with pytest.raises(PreconditionError) as exc:
            run(file_service.create_file_record("user_1", str(docs.id), _upload()))
        assert exc.value.message == "Cannot upload into a trashed folder."
        assert exc.value.status_code == 400
        assert storage.objects == {}
        assert file_crud.items == {}

    def test_upload_into_missing_folder(self, file_service):
        with pytest.raises(NotFoundError):
            run(file_service.create_file_record("user_1", "missing", _upload()))

    def test_empty_file_rejected(self, file_service, storage):
        with pytest.raises(ValidationError) as exc:
            run(file_service.create_file_record("user_1", None, _upload(data=b"")))
        assert exc.value.message == "File cannot be empty."
        assert storage.objects == {}

    def test_store_failure_writes_no_record(self, file_service, storage, file_crud):
        storage.fail = True
        with pytest.raises(UpstreamError):
            run(file_service.create_file_record("user_1", None, _upload()))
        assert file_crud.items == {}


class TestListFiles:
    def test_newest_first_with_urls(self, file_service, clock):
        first, _ = run(file_service.create_file_record("user_1", None, _upload(file_name="a")))
        clock.advance(1000)
        second, _ = run(file_service.create_file_record("user_1", None, _upload(file_name="b")))
        run(file_service.create_file_record("user_2", None, _upload(file_name="c")))

        listed = run(file_service.list_files_in_folder("user_1", None))

        assert [f.id for f, _ in listed] == [second.id, first.id]
        assert all(url.startswith("https://objects.test/") for _, url in listed)

    def test_trashed_folder(self, file_service, folder_service):
        docs = run(folder_service.create_folder("user_1", "Docs"))
        run(folder_service.soft_delete_folder("user_1", str(docs.id)))

        with pytest.raises(PreconditionError) as exc:
            run(file_service.list_files_in_folder("user_1", str(docs.id)))
        assert exc.value.message == "Folder is in trash."


class TestDeleteFile:
    def test_removes_object_and_record(self, file_service, storage, file_crud):
        file, _ = run(file_service.create_file_record("user_1", None, _upload()))

        run(file_service.delete_file_record("user_1", str(file.id)))

        assert storage.objects == {}
        assert file_crud.items == {}

    def test_unknown_file(self, file_service):
        with pytest.raises(NotFoundError) as exc:
            run(file_service.delete_file_record("user_1", "missing"))
        assert exc.value.message == "File not found."

    def test_other_users_file(self, file_service, file_crud):
        file, _ = run(file_service.create_file_record("user_2", None, _upload()))
        with pytest.raises(NotFoundError):
            run(file_service.delete_file_record("user_1", str(file.id)))
        assert str(file.id) in file_crud.items

    def test_record_failure_leaves_orphan_row(self, file_service, storage, file_crud):
        file, _ = run(file_service.create_file_record("user_1", None, _upload()))
        file_crud.fail_delete = True

        with pytest.raises(UpstreamError):
            run(file_service.delete_file_record("user_1", str(file.id)))

        assert storage.objects == {}
        assert str(file.id) in file_crud.items


def test_total_usage(file_service):
    run(file_service.create_file_record("user_1", None, _upload(data=b"12345")))
    run(file_service.create_file_record("user_1", None, _upload(data=b"678")))
    run(file_service.create_file_record("user_2", None, _upload(data=b"9")))

    usage = run(file_service.total_usage("user_1"))

    assert usage.total_bytes == 8
    assert usage.file_count == 2
