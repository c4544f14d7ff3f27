"""
Tests for the local media storage backend.
"""
import io
from urllib.parse import parse_qs, urlparse

import pytest

from src.storage import LocalFileStorage, is_valid_storage_id


class TestLocalFileStorage:

    def test_upload_url_carries_signed_token(self, storage):
        storage_id, url = storage.generate_upload_url()

        parsed = urlparse(url)
        assert parsed.path == f"/v1/media/uploads/{storage_id}"
        token = parse_qs(parsed.query)["token"][0]
        assert storage.verify_upload_token(storage_id, token) is True

    def test_token_is_bound_to_storage_id(self, storage):
        storage_id, _ = storage.generate_upload_url()
        other_id, _ = storage.generate_upload_url()
        token = storage.make_upload_token(storage_id)

        assert storage_id != other_id
        assert storage.verify_upload_token(other_id, token) is False

    def test_token_from_other_key_rejected(self, storage, tmp_path):
        other = LocalFileStorage(base_dir=str(tmp_path / "other"), signing_key="another-key")
        storage_id, _ = storage.generate_upload_url()
        assert storage.verify_upload_token(storage_id, other.make_upload_token(storage_id)) is False

    def test_expired_token_rejected(self, tmp_path):
        storage = LocalFileStorage(base_dir=str(tmp_path / "u"), signing_key="k", upload_ttl_sec=-60)
        storage_id, _ = storage.generate_upload_url()
        assert storage.verify_upload_token(storage_id, storage.make_upload_token(storage_id)) is False

    def test_url_only_once_stored(self, storage):
        storage_id, _ = storage.generate_upload_url()
        assert storage.get_url(storage_id) is None

        url = storage.save(storage_id, io.BytesIO(b"bytes"))

        assert url == f"http://testserver/uploads/{storage_id}"
        assert storage.get_url(storage_id) == url

    def test_delete(self, storage):
        storage_id, _ = storage.generate_upload_url()
        storage.save(storage_id, io.BytesIO(b"bytes"))

        assert storage.delete(storage_id) is True
        assert storage.delete(storage_id) is False
        assert storage.get_url(storage_id) is None

    @pytest.mark.parametrize("bad_id", ["../etc/passwd", "a/b", ""])
    def test_rejects_path_like_ids(self, storage, bad_id):
        with pytest.raises(ValueError):
            storage.save(bad_id, io.BytesIO(b"x"))

    @pytest.mark.parametrize("bad_id", ["avatar-1.jpg", "../etc/passwd", "a/b", "", None])
    def test_reads_on_malformed_ids_are_empty(self, storage, bad_id):
        assert storage.exists(bad_id) is False
        assert storage.get_url(bad_id) is None
        assert storage.delete(bad_id) is False

    def test_exists_only_after_save(self, storage):
        storage_id, _ = storage.generate_upload_url()
        assert storage.exists(storage_id) is False
        storage.save(storage_id, io.BytesIO(b"bytes"))
        assert storage.exists(storage_id) is True


class TestStorageIds:

    def test_generated_ids_are_valid(self, storage):
        storage_id, _ = storage.generate_upload_url()
        assert is_valid_storage_id(storage_id)

    @pytest.mark.parametrize("value", ["avatar-1.jpg", "deadbeef", "A" * 32, "g" * 32, 12345, None])
    def test_other_values_are_not(self, value):
        assert is_valid_storage_id(value) is False
