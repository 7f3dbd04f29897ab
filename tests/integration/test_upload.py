"""
File upload integration tests.

Verifies:
- Single and multi-file upload through the JSON API
- Per-file results in a batch
- File type, size and content validation
- Form upload fallback with toasts
"""
import re

from fastapi.testclient import TestClient

from school_gallery.infrastructure.repositories import PhotoRepository


def _csrf_headers(client: TestClient) -> dict:
    """Get CSRF headers for POST requests."""
    token = client.cookies.get("gallery_csrf", "")
    return {"X-CSRF-Token": token}


class TestApiUpload:
    """Test POST /api/admin/albums/{id}/photos."""

    def test_upload_single_photo(
        self,
        authenticated_client: TestClient,
        test_album: dict,
        test_image_bytes: bytes,
        patched_config: dict,
        db_connection
    ):
        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("foto upacara.jpg", test_image_bytes, "image/jpeg")},
            headers=_csrf_headers(authenticated_client)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["uploaded"] == 1
        assert data["failed"] == 0

        result = data["results"][0]
        assert result["status"] == "success"
        assert result["filename"] == "foto upacara.jpg"

        # Object name: epoch ms + filename with whitespace replaced
        image_url = result["photo"]["image_url"]
        assert re.fullmatch(r"/storage/gallery/\d{13}-foto_upacara\.jpg", image_url)

        name = image_url.rsplit("/", 1)[-1]
        assert (patched_config["storage_dir"] / "gallery" / name).read_bytes() == test_image_bytes
        assert PhotoRepository(db_connection).count() == 1

    def test_uploaded_photo_is_served(self, authenticated_client: TestClient, test_album: dict, test_image_bytes: bytes):
        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("a.jpg", test_image_bytes, "image/jpeg")},
            headers=_csrf_headers(authenticated_client)
        )
        image_url = response.json()["results"][0]["photo"]["image_url"]

        served = authenticated_client.get(image_url)
        assert served.status_code == 200
        assert served.content == test_image_bytes

    def test_filename_with_url_characters(
        self,
        authenticated_client: TestClient,
        test_album: dict,
        test_image_bytes: bytes,
        patched_config: dict
    ):
        """Photos named with #, ? or % can be shown and deleted."""
        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("kelas#1 ?%41.jpg", test_image_bytes, "image/jpeg")},
            headers=_csrf_headers(authenticated_client)
        )
        photo = response.json()["results"][0]["photo"]
        assert re.fullmatch(r"/storage/gallery/\d{13}-kelas_1___41\.jpg", photo["image_url"])

        served = authenticated_client.get(photo["image_url"])
        assert served.status_code == 200
        assert served.content == test_image_bytes

        deleted = authenticated_client.delete(
            f"/api/admin/photos/{photo['id']}",
            headers=_csrf_headers(authenticated_client)
        )
        assert deleted.status_code == 200
        assert list((patched_config["storage_dir"] / "gallery").iterdir()) == []

    def test_same_object_name_is_not_overwritten(
        self,
        authenticated_client: TestClient,
        test_album: dict,
        test_image_bytes: bytes,
        test_png_bytes: bytes,
        patched_config: dict,
        monkeypatch
    ):
        """Two files named alike in the same millisecond: the second fails."""
        from school_gallery.application.services import upload_service
        original = upload_service.object_name_for
        monkeypatch.setattr(upload_service, "object_name_for", lambda filename: original(filename, now_ms=1700000000000))

        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files=[
                ("files", ("sama.jpg", test_image_bytes, "image/jpeg")),
                ("files", ("sama.jpg", test_image_bytes, "image/jpeg")),
            ],
            headers=_csrf_headers(authenticated_client)
        )

        results = response.json()["results"]
        assert [r["status"] for r in results] == ["success", "error"]
        assert "already exists" in results[1]["error"]
        assert [p.name for p in (patched_config["storage_dir"] / "gallery").iterdir()] == ["1700000000000-sama.jpg"]

    def test_batch_reports_each_file(
        self,
        authenticated_client: TestClient,
        test_album: dict,
        test_image_bytes: bytes,
        test_png_bytes: bytes,
        db_connection
    ):
        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files=[
                ("files", ("satu.jpg", test_image_bytes, "image/jpeg")),
                ("files", ("catatan.txt", b"bukan gambar", "text/plain")),
                ("files", ("dua.png", test_png_bytes, "image/png")),
            ],
            headers=_csrf_headers(authenticated_client)
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["status"] for r in data["results"]] == ["success", "error", "success"]
        assert data["uploaded"] == 2
        assert data["failed"] == 1
        assert data["results"][1]["error"]
        assert PhotoRepository(db_connection).count() == 2

    def test_reject_disallowed_type(self, authenticated_client: TestClient, test_album: dict):
        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("video.mp4", b"\x00\x00\x00\x20ftypisom", "video/mp4")},
            headers=_csrf_headers(authenticated_client)
        )

        result = response.json()["results"][0]
        assert result["status"] == "error"
        assert "jpg, png, gif, webp" in result["error"]

    def test_reject_spoofed_content(self, authenticated_client: TestClient, test_album: dict, db_connection):
        """A script renamed to .jpg is rejected by its magic bytes."""
        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("shell.jpg", b"<?php system($_GET['c']); ?>", "image/jpeg")},
            headers=_csrf_headers(authenticated_client)
        )

        result = response.json()["results"][0]
        assert result["status"] == "error"
        assert result["error"] == "Isi file bukan gambar yang valid."
        assert PhotoRepository(db_connection).count() == 0

    def test_reject_oversized_file(self, authenticated_client: TestClient, test_album: dict, test_image_bytes: bytes, monkeypatch):
        import school_gallery.config as config
        monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 100)

        response = authenticated_client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("besar.jpg", test_image_bytes, "image/jpeg")},
            headers=_csrf_headers(authenticated_client)
        )

        result = response.json()["results"][0]
        assert result["status"] == "error"
        assert "melebihi batas" in result["error"]

    def test_upload_to_missing_album(self, authenticated_client: TestClient, test_image_bytes: bytes):
        response = authenticated_client.post(
            "/api/admin/albums/tidak-ada/photos",
            files={"files": ("a.jpg", test_image_bytes, "image/jpeg")},
            headers=_csrf_headers(authenticated_client)
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Album tidak ditemukan."

    def test_upload_requires_login(self, client: TestClient, test_album: dict, test_image_bytes: bytes):
        client.get("/")
        response = client.post(
            f"/api/admin/albums/{test_album['id']}/photos",
            files={"files": ("a.jpg", test_image_bytes, "image/jpeg")},
            headers=_csrf_headers(client)
        )

        assert response.status_code == 401


class TestFormUpload:
    """Test the HTML form fallback."""

    def test_form_upload_shows_count_toast(self, authenticated_client: TestClient, test_album: dict, test_image_bytes: bytes):
        response = authenticated_client.post(
            f"/admin/album/{test_album['id']}/photos",
            files=[
                ("files", ("satu.jpg", test_image_bytes, "image/jpeg")),
                ("files", ("dua.jpg", test_image_bytes, "image/jpeg")),
            ],
            headers=_csrf_headers(authenticated_client)
        )

        assert response.status_code == 200
        assert "2 foto berhasil diunggah." in response.text
        assert response.text.count('class="editor-photo"') == 2

    def test_form_upload_reports_failures(self, authenticated_client: TestClient, test_album: dict):
        response = authenticated_client.post(
            f"/admin/album/{test_album['id']}/photos",
            files={"files": ("catatan.txt", b"halo", "text/plain")},
            headers=_csrf_headers(authenticated_client)
        )

        assert "Gagal mengunggah foto: catatan.txt" in response.text
