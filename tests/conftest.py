"""Test configuration and fixtures for the school gallery.

This module provides isolated test environments:
- Temporary SQLite database (local backend)
- Temporary storage bucket directory
- A fresh admin account and session for each test
"""
import io
import os
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure the package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing app modules
os.environ["GALLERY_BACKEND"] = "local"
os.environ["GALLERY_BASE_URL"] = ""


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, storage_dir, base_dir
    """
    env = {
        "db_path": tmp_path / "test.db",
        "storage_dir": tmp_path / "storage",
        "base_dir": tmp_path
    }
    env["storage_dir"].mkdir(parents=True, exist_ok=True)
    return env


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict, monkeypatch):
    """Point the app configuration at the isolated directories."""
    import school_gallery.config as config
    from school_gallery.infrastructure.storage import reset_storage

    monkeypatch.setattr(config, "GALLERY_BACKEND", "local")
    monkeypatch.setattr(config, "DATABASE_PATH", isolated_environment["db_path"])
    monkeypatch.setattr(config, "STORAGE_BASE_PATH", isolated_environment["storage_dir"])
    reset_storage()

    yield isolated_environment

    reset_storage()


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict):
    """Initialize fresh database with schema for each test."""
    from school_gallery.database import init_db

    init_db()
    yield patched_config["db_path"]


@pytest.fixture(scope="function")
def db_connection(fresh_database: Path):
    """Raw connection to the test database."""
    from school_gallery.database import create_connection

    conn = create_connection()
    yield conn
    conn.close()


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/")
            assert response.status_code == 200
    """
    from school_gallery.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def admin_user(db_connection) -> Dict:
    """Create an admin account and return its credentials."""
    from school_gallery.infrastructure.repositories import UserRepository

    credentials = {
        "email": "admin@sekolah.sch.id",
        "password": "Rahasia123!",
    }
    credentials["id"] = UserRepository(db_connection).create(
        credentials["email"], credentials["password"]
    )
    return credentials


@pytest.fixture(scope="function")
def authenticated_client(client: TestClient, admin_user: Dict) -> TestClient:
    """Client logged in as admin_user.

    Usage:
        def test_protected(authenticated_client):
            response = authenticated_client.get("/admin")
            assert response.status_code == 200  # Not a redirect to login
    """
    response = client.post(
        "/admin/login",
        data={"email": admin_user["email"], "password": admin_user["password"]},
        follow_redirects=False
    )

    assert response.status_code == 303, "Login should redirect to the dashboard"
    assert "gallery_session" in response.cookies, "Session cookie should be set"

    return client


@pytest.fixture(scope="function")
def test_image_bytes() -> bytes:
    """Create minimal valid JPEG image in memory."""
    from PIL import Image

    img = Image.new("RGB", (100, 100), color="red")
    img_bytes = io.BytesIO()
    img.save(img_bytes, format="JPEG", quality=85)
    return img_bytes.getvalue()


@pytest.fixture(scope="function")
def test_png_bytes() -> bytes:
    """Minimal valid PNG (wide, to check cover cropping)."""
    from PIL import Image

    img = Image.new("RGB", (300, 100), color="blue")
    img_bytes = io.BytesIO()
    img.save(img_bytes, format="PNG")
    return img_bytes.getvalue()


@pytest.fixture(scope="function")
def test_album(db_connection) -> Dict:
    """An album created directly in the database."""
    from school_gallery.infrastructure.repositories import AlbumRepository

    return AlbumRepository(db_connection).create("Pentas Seni 2026", "Acara tahunan sekolah")


@pytest.fixture(scope="function")
def stored_photo(db_connection, test_album: Dict, test_image_bytes: bytes, patched_config: Dict) -> Dict:
    """A photo row in test_album whose object exists in the local bucket."""
    from school_gallery.infrastructure.repositories import PhotoRepository

    bucket_dir = patched_config["storage_dir"] / "gallery"
    bucket_dir.mkdir(parents=True, exist_ok=True)
    (bucket_dir / "1700000000000-foto_1.jpg").write_bytes(test_image_bytes)

    rows = PhotoRepository(db_connection).create_many([{
        "album_id": test_album["id"],
        "image_url": "/storage/gallery/1700000000000-foto_1.jpg",
        "caption": "Pembukaan",
    }])
    return rows[0]
