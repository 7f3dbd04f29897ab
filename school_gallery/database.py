"""SQLite database for the local backend.

The production deployment keeps its data in Supabase (see
``sql/supabase_schema.sql``). This module provides the same two tables plus
admin accounts and sessions for running the site without Supabase.
"""
import sqlite3

from . import config
from .logging_config import get_logger

logger = get_logger(__name__)


def create_connection() -> sqlite3.Connection:
    """Open a new connection to the local database.

    Callers own the connection and must close it.
    """
    conn = sqlite3.connect(config.DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # Cascading deletes from albums to photos depend on this pragma
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db():
    """Initialize database schema"""
    config.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
    db = create_connection()
    try:
        db.execute("""
            CREATE TABLE IF NOT EXISTS albums (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT,
                cover_image_url TEXT,
                created_at TEXT NOT NULL
            )
        """)

        db.execute("""
            CREATE TABLE IF NOT EXISTS photos (
                id TEXT PRIMARY KEY,
                album_id TEXT NOT NULL,
                image_url TEXT NOT NULL,
                caption TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (album_id) REFERENCES albums(id) ON DELETE CASCADE
            )
        """)

        db.execute("CREATE INDEX IF NOT EXISTS idx_photos_album ON photos(album_id, created_at)")

        # Admin accounts
        db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Login sessions
        db.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                id TEXT PRIMARY KEY,
                user_id INTEGER NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                expires_at TIMESTAMP NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        db.commit()
    finally:
        db.close()

    logger.info("Local database ready at %s", config.DATABASE_PATH)


def cleanup_expired_sessions() -> int:
    """Delete expired sessions. Returns the number removed."""
    db = create_connection()
    try:
        cursor = db.execute("DELETE FROM sessions WHERE expires_at <= datetime('now')")
        db.commit()
        return cursor.rowcount
    finally:
        db.close()
