"""Live server and seed data for the browser tests.

These tests drive a real browser through Playwright and are deselected by
default. Run them with:

    pip install -e ".[e2e]"
    playwright install chromium
    pytest -m e2e tests/e2e
"""
import io
import socket
import threading
import time

import pytest
import uvicorn

ADMIN = {"email": "admin@sekolah.sch.id", "password": "Rahasia123!"}
CAPTIONS = ["Upacara pembukaan", "Tari saman", "Penutupan"]
UPLOAD_LIMIT = 1024 * 1024


def _free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def jpeg_bytes(color="red", size=(320, 240)) -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture(scope="module")
def live_server(tmp_path_factory):
    """Run the app under uvicorn on a free port with a seeded local backend.

    Seeds one admin account, an album with three captioned photos and an
    empty album for uploads.
    """
    import school_gallery.config as config
    from school_gallery.database import create_connection, init_db
    from school_gallery.infrastructure.repositories import (
        AlbumRepository, PhotoRepository, UserRepository,
    )
    from school_gallery.infrastructure.storage import get_storage, reset_storage
    from school_gallery.main import app

    base = tmp_path_factory.mktemp("e2e")
    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(config, "GALLERY_BACKEND", "local")
        mp.setattr(config, "DATABASE_PATH", base / "gallery.db")
        mp.setattr(config, "STORAGE_BASE_PATH", base / "storage")
        mp.setattr(config, "MAX_UPLOAD_SIZE", UPLOAD_LIMIT)
        reset_storage()
        init_db()

        db = create_connection()
        try:
            UserRepository(db).create(ADMIN["email"], ADMIN["password"])
            albums = AlbumRepository(db)
            album = albums.create("Pentas Seni", "Acara tahunan sekolah")
            empty_album = albums.create("Kegiatan Baru")

            storage = get_storage()
            rows = []
            for index, (caption, color) in enumerate(zip(CAPTIONS, ["red", "green", "blue"])):
                name = f"170000000000{index}-foto_{index}.jpg"
                (storage.base_path / storage.bucket / name).write_bytes(jpeg_bytes(color))
                rows.append({
                    "album_id": album["id"],
                    "image_url": storage.get_public_url(name),
                    "caption": caption,
                })
            PhotoRepository(db).create_many(rows)
        finally:
            db.close()

        port = _free_port()
        server = uvicorn.Server(
            uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning")
        )
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()

        deadline = time.monotonic() + 10
        while not server.started:
            if time.monotonic() > deadline:
                raise RuntimeError("uvicorn did not start")
            time.sleep(0.05)

        yield {
            "url": f"http://127.0.0.1:{port}",
            "album": album,
            "empty_album": empty_album,
            "bucket_dir": storage.base_path / storage.bucket,
        }

        server.should_exit = True
        thread.join(timeout=10)
        reset_storage()


@pytest.fixture
def logged_in_page(page, live_server):
    """Log in as the seeded admin before the test."""
    page.goto(f"{live_server['url']}/admin/login")
    page.fill('[name="email"]', ADMIN["email"])
    page.fill('[name="password"]', ADMIN["password"])
    page.click('button[type="submit"]')
    page.wait_for_url("**/admin")
    return page
