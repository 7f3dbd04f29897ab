"""Unit tests for LocalStorage backend."""
import asyncio
import io
import tempfile
from pathlib import Path

import pytest

from school_gallery.infrastructure.storage import (
    FileNotFoundError as StorageFileNotFoundError,
    LocalStorage,
    StorageConfig,
    UploadError,
    object_name_from_url,
)


@pytest.fixture
def temp_storage():
    """Create a temporary LocalStorage instance."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = StorageConfig(backend="local", bucket="gallery", base_path=Path(tmpdir))
        yield LocalStorage(config)


@pytest.fixture
def run_async():
    """Helper to run async functions in sync context."""
    def _run(coro):
        return asyncio.run(coro)
    return _run


class TestLocalStorageUpload:
    """Test upload functionality."""

    def test_upload_creates_object_in_bucket(self, temp_storage, run_async):
        result = run_async(temp_storage.upload("1700000000000-foto.jpg", b"content", "image/jpeg"))

        assert result == "gallery/1700000000000-foto.jpg"
        assert (temp_storage.base_path / "gallery" / "1700000000000-foto.jpg").read_bytes() == b"content"
        assert temp_storage.exists("1700000000000-foto.jpg") is True

    def test_upload_bytes_io(self, temp_storage, run_async):
        run_async(temp_storage.upload("stream.jpg", io.BytesIO(b"stream content")))

        assert run_async(temp_storage.download("stream.jpg")) == b"stream content"

    def test_upload_rejects_existing_object(self, temp_storage, run_async):
        run_async(temp_storage.upload("existing.jpg", b"first"))

        with pytest.raises(UploadError, match="already exists"):
            run_async(temp_storage.upload("existing.jpg", b"second"))

        # The first object is left untouched
        assert run_async(temp_storage.download("existing.jpg")) == b"first"

    def test_upload_strips_directories(self, temp_storage, run_async):
        """Names cannot escape the bucket directory."""
        run_async(temp_storage.upload("../../evil.jpg", b"x"))

        assert (temp_storage.base_path / "gallery" / "evil.jpg").exists()
        assert not (temp_storage.base_path.parent / "evil.jpg").exists()


class TestLocalStorageDownload:
    """Test download functionality."""

    def test_download_missing_raises(self, temp_storage, run_async):
        with pytest.raises(StorageFileNotFoundError):
            run_async(temp_storage.download("missing.jpg"))


class TestLocalStorageDelete:
    """Test delete functionality."""

    def test_delete_existing(self, temp_storage, run_async):
        run_async(temp_storage.upload("a.jpg", b"a"))

        assert run_async(temp_storage.delete("a.jpg")) is True
        assert temp_storage.exists("a.jpg") is False

    def test_delete_missing_returns_false(self, temp_storage, run_async):
        assert run_async(temp_storage.delete("missing.jpg")) is False

    def test_delete_batch(self, temp_storage, run_async):
        run_async(temp_storage.upload("a.jpg", b"a"))
        run_async(temp_storage.upload("b.jpg", b"b"))

        results = run_async(temp_storage.delete_batch(["a.jpg", "b.jpg", "c.jpg"]))

        assert results == [True, True, False]


class TestPublicUrls:
    """Test public URLs and object names derived from them."""

    def test_public_url(self, temp_storage):
        assert temp_storage.get_public_url("1-a.jpg") == "/storage/gallery/1-a.jpg"

    def test_public_url_escapes_name(self, temp_storage):
        url = temp_storage.get_public_url("1-kelas#1 %41.jpg")

        assert url == "/storage/gallery/1-kelas%231%20%2541.jpg"
        assert object_name_from_url(url) == "1-kelas#1 %41.jpg"

    def test_public_url_with_prefix(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            storage = LocalStorage(StorageConfig(
                backend="local", base_path=Path(tmpdir), public_prefix="/galeri"
            ))
            assert storage.get_public_url("1-a.jpg") == "/galeri/storage/gallery/1-a.jpg"

    def test_requires_local_backend(self):
        with pytest.raises(ValueError):
            LocalStorage(StorageConfig(backend="supabase"))

    @pytest.mark.parametrize("url,expected", [
        ("https://x.supabase.co/storage/v1/object/public/gallery/1700-foto.jpg", "1700-foto.jpg"),
        ("/storage/gallery/1700-foto.jpg?width=200&height=200", "1700-foto.jpg"),
        ("/storage/gallery/1700-foto%20baru.jpg", "1700-foto baru.jpg"),
        ("https://x.supabase.co/storage/v1/object/public/gallery/", ""),
        ("", ""),
        (None, ""),
    ])
    def test_object_name_from_url(self, url, expected):
        assert object_name_from_url(url) == expected
